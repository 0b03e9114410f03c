# council/controllers/admin_controller.py

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt

from council.models.enums import OutboxStatus, RentalStatus
from council.repositories.outbox_repo import OutboxRepo
from council.repositories.rental_repo import RentalRepo
from council.repositories.user_repo import UserRepo
from council.services.context import get_services
from council.services.item_service import ItemService
from council.services.lockbox_service import LockboxService
from council.utils.decorators import admin_required
from council.utils.http import json_body, fail, json_error

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/lockboxes")
@admin_required
def list_lockboxes():
    return jsonify({"success": True, "data": [row.to_dict() for row in LockboxService.list_all()]})


@admin_bp.put("/lockboxes")
@admin_required
def update_lockbox():
    data = json_body()
    changed_by = get_jwt().get("username") or "admin"
    try:
        row = LockboxService.update_password(
            data.get("campus"), data.get("location"), data.get("password"), changed_by
        )
        return jsonify({"success": True, "data": row.to_dict()})
    except ValueError as e:
        return fail(e, 400)


@admin_bp.get("/lockboxes/<string:campus>")
@admin_required
def current_lockbox(campus: str):
    try:
        row = LockboxService.current_for_campus(campus)
    except ValueError as e:
        return fail(e, 400)
    if not row:
        return json_error("No lockbox password is set for this campus", 404)
    return jsonify({"success": True, "data": row.to_dict()})


@admin_bp.get("/admin/overview")
@admin_required
def overview():
    return jsonify({
        "success": True,
        "data": {
            "items": ItemService.statistics(),
            "rentals": {
                "active": RentalRepo.count_by_status(RentalStatus.RENTED.value),
                "overdue": RentalRepo.count_by_status(RentalStatus.OVERDUE.value),
            },
            "users": len(UserRepo.list_all()),
            "outbox_pending": OutboxRepo.count_by_status(OutboxStatus.PENDING.value),
            "penalties": get_services().penalties.statistics(),
        },
    })
