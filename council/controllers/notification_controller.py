from flask import Blueprint, jsonify
from council.services.context import get_services
from council.utils.decorators import admin_required

notif_bp = Blueprint("notifications", __name__)


@notif_bp.post("/drain")
@admin_required
def drain_outbox():
    result = get_services().outbox.drain()
    return jsonify({"success": True, "data": result.to_dict()})


@notif_bp.post("/retry")
@admin_required
def retry_failed():
    count = get_services().outbox.retry_failed()
    return jsonify({"success": True, "requeued": count})


@notif_bp.post("/test")
@admin_required
def send_test():
    ok = get_services().outbox.send_test()
    return jsonify({"success": ok, "message": "Test message sent" if ok else "Test message could not be sent"})


@notif_bp.post("/daily-summary")
@admin_required
def daily_summary():
    outbox = get_services().outbox
    event = outbox.enqueue_daily_summary()
    result = outbox.drain()
    return jsonify({"success": True, "summary": event.payload, "data": result.to_dict()})
