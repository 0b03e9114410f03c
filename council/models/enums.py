from enum import Enum


class RentalStatus(str, Enum):
    RENTED = "rented"
    RETURNED = "returned"
    OVERDUE = "overdue"
    LOST = "lost"
    DAMAGED = "damaged"


ACTIVE_RENTAL_STATUSES = (RentalStatus.RENTED.value, RentalStatus.OVERDUE.value)


class ItemStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    LOST = "lost"
    DAMAGED = "damaged"


class Campus(str, Enum):
    YANGSAN = "yangsan"
    JANGJEOM = "jangjeom"


class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"
    MANAGER = "manager"


class SanctionType(str, Enum):
    WARNING = "warning"
    SUSPENSION_1_MONTH = "suspension_1_month"
    SUSPENSION_3_MONTHS = "suspension_3_months"
    PERMANENT_BAN = "permanent_ban"


class PenaltyType(str, Enum):
    OVERDUE = "OVERDUE"
    DAMAGE_MINOR = "DAMAGE_MINOR"
    DAMAGE_MAJOR = "DAMAGE_MAJOR"
    LOSS = "LOSS"
    RETURN_DELAY = "RETURN_DELAY"
    MULTIPLE_OVERDUE = "MULTIPLE_OVERDUE"
    REDUCTION = "REDUCTION"


class PhotoType(str, Enum):
    STUDENT_ID = "student_id"
    ITEM_PRE_PICKUP = "item_pre_pickup"
    LOCKBOX_POST_PICKUP = "lockbox_post_pickup"
    ITEM_PRE_RETURN = "item_pre_return"
    LOCKBOX_POST_RETURN = "lockbox_post_return"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class OutboxStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"
