from flask import Blueprint, request, jsonify
from council.services.content_service import NoticeService, EventService
from council.utils.decorators import admin_required
from council.utils.http import json_body, fail, not_found_or_bad_request

notice_bp = Blueprint("notices", __name__)
event_bp = Blueprint("events", __name__)


# ---------------- notices ----------------

@notice_bp.get("/", strict_slashes=False)
def list_notices():
    return jsonify({"success": True, "data": [n.to_dict() for n in NoticeService.list_notices()]})


@notice_bp.get("/important")
def important_notices():
    return jsonify({"success": True, "data": [n.to_dict() for n in NoticeService.list_important()]})


@notice_bp.get("/<int:notice_id>")
def get_notice(notice_id: int):
    try:
        notice = NoticeService.get_notice(notice_id, count_view=True)
        return jsonify({"success": True, "data": notice.to_dict()})
    except ValueError as e:
        return fail(e, 404)


@notice_bp.post("/", strict_slashes=False)
@admin_required
def create_notice():
    try:
        notice = NoticeService.create_notice(json_body())
        return jsonify({"success": True, "data": notice.to_dict()}), 201
    except KeyError:
        return fail("title and content are required", 400)


@notice_bp.put("/<int:notice_id>")
@admin_required
def update_notice(notice_id: int):
    try:
        notice = NoticeService.update_notice(notice_id, json_body())
        return jsonify({"success": True, "data": notice.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)


@notice_bp.delete("/<int:notice_id>")
@admin_required
def delete_notice(notice_id: int):
    try:
        NoticeService.delete_notice(notice_id)
        return jsonify({"success": True})
    except ValueError as e:
        return fail(e, 404)


# ---------------- events ----------------

@event_bp.get("/", strict_slashes=False)
def list_events():
    return jsonify({"success": True, "data": [e.to_dict() for e in EventService.list_events()]})


@event_bp.get("/upcoming")
def upcoming_events():
    limit = request.args.get("limit", default=3, type=int)
    return jsonify({"success": True, "data": [e.to_dict() for e in EventService.list_upcoming(limit)]})


@event_bp.get("/featured")
def featured_events():
    return jsonify({"success": True, "data": [e.to_dict() for e in EventService.list_featured()]})


@event_bp.get("/<int:event_id>")
def get_event(event_id: int):
    try:
        return jsonify({"success": True, "data": EventService.get_event(event_id).to_dict()})
    except ValueError as e:
        return fail(e, 404)


@event_bp.post("/", strict_slashes=False)
@admin_required
def create_event():
    try:
        event = EventService.create_event(json_body())
        return jsonify({"success": True, "data": event.to_dict()}), 201
    except KeyError:
        return fail("title and date are required", 400)
    except ValueError as e:
        return fail(e, 400)


@event_bp.put("/<int:event_id>")
@admin_required
def update_event(event_id: int):
    try:
        event = EventService.update_event(event_id, json_body())
        return jsonify({"success": True, "data": event.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)


@event_bp.delete("/<int:event_id>")
@admin_required
def delete_event(event_id: int):
    try:
        EventService.delete_event(event_id)
        return jsonify({"success": True})
    except ValueError as e:
        return fail(e, 404)
