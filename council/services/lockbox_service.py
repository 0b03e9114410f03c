from council.models.enums import Campus
from council.models.lockbox_password import LockboxPassword
from council.repositories.lockbox_repo import LockboxRepo
from council.utils.timeutil import utcnow


class LockboxService:
    @staticmethod
    def update_password(campus: str, location: str, new_password: str, changed_by: str):
        """Create the (campus, location) lockbox or rotate its password, keeping the previous one."""
        campus = Campus(campus).value
        location = (location or "").strip()
        new_password = (new_password or "").strip()
        if not location or not new_password:
            raise ValueError("location and password are required")
        if not new_password.isdigit():
            raise ValueError("Lockbox passwords are numeric")

        now = utcnow()
        row = LockboxRepo.get(campus, location)
        if row:
            row.previous_password = row.current_password
            row.current_password = new_password
            row.last_changed_by = changed_by
            row.last_changed_at = now
        else:
            row = LockboxPassword(
                campus=campus,
                location=location,
                current_password=new_password,
                last_changed_by=changed_by,
                last_changed_at=now,
                created_at=now,
            )
        return LockboxRepo.save(row)

    @staticmethod
    def current_for_campus(campus: str):
        return LockboxRepo.latest_for_campus(Campus(campus).value)

    @staticmethod
    def list_all():
        return LockboxRepo.list_all()
