from council.models.content import Event, Notice
from council.models.enums import EventStatus
from council.repositories.content_repo import EventRepo, NoticeRepo


def _preview(content: str, limit: int = 120) -> str:
    text = " ".join((content or "").split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


class NoticeService:
    @staticmethod
    def list_notices():
        return NoticeRepo.list_all()

    @staticmethod
    def list_important():
        return NoticeRepo.list_important()

    @staticmethod
    def get_notice(notice_id: int, count_view: bool = False):
        notice = NoticeRepo.get(notice_id)
        if not notice:
            raise ValueError("Notice not found")
        if count_view:
            notice.views = (notice.views or 0) + 1
            NoticeRepo.update()
        return notice

    @staticmethod
    def create_notice(data: dict):
        notice = Notice(
            title=data["title"],
            content=data["content"],
            category=data.get("category", "general"),
            important=bool(data.get("important", False)),
        )
        notice.preview = data.get("preview") or _preview(notice.content)
        return NoticeRepo.create(notice)

    @staticmethod
    def update_notice(notice_id: int, data: dict):
        notice = NoticeService.get_notice(notice_id)
        for k in ["title", "category", "content", "preview"]:
            if k in data:
                setattr(notice, k, data[k])
        if "important" in data:
            notice.important = bool(data["important"])
        if "content" in data and "preview" not in data:
            notice.preview = _preview(notice.content)
        NoticeRepo.update()
        return notice

    @staticmethod
    def delete_notice(notice_id: int):
        NoticeRepo.delete(NoticeService.get_notice(notice_id))


class EventService:
    _FIELDS = ["title", "category", "description", "content", "date", "time", "location",
               "image", "organizer", "contact", "registration_deadline"]

    @staticmethod
    def _status(value):
        try:
            return EventStatus(value).value
        except ValueError:
            raise ValueError("status must be upcoming, ongoing or completed")

    @staticmethod
    def list_events():
        return EventRepo.list_all()

    @staticmethod
    def list_upcoming(limit: int = 3):
        return EventRepo.list_upcoming(limit)

    @staticmethod
    def list_featured():
        return EventRepo.list_featured()

    @staticmethod
    def get_event(event_id: int):
        event = EventRepo.get(event_id)
        if not event:
            raise ValueError("Event not found")
        return event

    @staticmethod
    def create_event(data: dict):
        event = Event(title=data["title"], date=data["date"])
        for k in EventService._FIELDS:
            if k in data and k not in ("title", "date"):
                setattr(event, k, data[k])
        event.status = EventService._status(data.get("status", EventStatus.UPCOMING.value))
        event.registration_required = bool(data.get("registration_required", False))
        event.featured = bool(data.get("featured", False))
        return EventRepo.create(event)

    @staticmethod
    def update_event(event_id: int, data: dict):
        event = EventService.get_event(event_id)
        for k in EventService._FIELDS:
            if k in data:
                setattr(event, k, data[k])
        if "status" in data:
            event.status = EventService._status(data["status"])
        for flag in ("registration_required", "featured"):
            if flag in data:
                setattr(event, flag, bool(data[flag]))
        EventRepo.update()
        return event

    @staticmethod
    def delete_event(event_id: int):
        EventRepo.delete(EventService.get_event(event_id))
