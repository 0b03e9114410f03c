# council/controllers/penalty_controller.py

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from council.repositories.user_repo import UserRepo
from council.services.context import get_services
from council.utils.decorators import admin_required, current_identity
from council.utils.http import json_body, fail, json_error, not_found_or_bad_request

penalty_bp = Blueprint("penalties", __name__)


def _summary(user):
    return {
        "user_id": user.id,
        "penalty_points": user.penalty_points,
        "sanction_type": user.sanction_type,
        "sanction_end_date": user.sanction_end_date.isoformat() if user.sanction_end_date else None,
    }


@penalty_bp.get("/my")
@jwt_required()
def my_penalties():
    user_id, _role = current_identity()
    user = UserRepo.get_by_id(user_id)
    if not user:
        return json_error("User not found", 404)

    records = get_services().penalties.ledger_for(user_id)
    return jsonify({
        "success": True,
        "summary": _summary(user),
        "data": [r.to_dict() for r in records],
    })


@penalty_bp.get("/users/<int:user_id>")
@admin_required
def user_penalties(user_id: int):
    user = UserRepo.get_by_id(user_id)
    if not user:
        return json_error("User not found", 404)
    records = get_services().penalties.ledger_for(user_id)
    return jsonify({"success": True, "summary": _summary(user), "data": [r.to_dict() for r in records]})


@penalty_bp.post("/users/<int:user_id>/reconcile")
@admin_required
def reconcile(user_id: int):
    try:
        drift = get_services().penalties.reconcile(user_id)
    except ValueError as e:
        return fail(e, 404)
    return jsonify({"success": True, "drift": drift, "summary": _summary(UserRepo.get_by_id(user_id))})


@penalty_bp.post("/apply")
@admin_required
def apply_penalty():
    """
    Body: {"user_id": 1, "kind": "minor|major|loss|return_delay",
           "item_name": "...", "description": "...", "days": 2, "rental_id": null}
    """
    data = json_body()
    penalties = get_services().penalties
    try:
        user_id = int(data["user_id"])
        kind = data["kind"]
        item_name = (data.get("item_name") or "").strip()
        rental_id = data.get("rental_id")
        if kind == "return_delay":
            record = penalties.apply_return_delay_penalty(
                user_id, item_name, int(data.get("days", 0)), rental_id=rental_id
            )
        else:
            record = penalties.apply_damage_penalty(
                user_id, kind, item_name, (data.get("description") or "").strip(), rental_id=rental_id
            )
    except (KeyError, TypeError):
        return fail("user_id and kind are required", 400)
    except ValueError as e:
        return not_found_or_bad_request(e)

    return jsonify({
        "success": True,
        "data": record.to_dict(),
        "summary": _summary(UserRepo.get_by_id(user_id)),
    }), 201


@penalty_bp.post("/reduce")
@admin_required
def reduce_penalty():
    admin_id, _role = current_identity()
    data = json_body()
    try:
        user_id = int(data["user_id"])
        points = int(data["points"])
        reason = (data.get("reason") or "").strip()
        if not reason:
            return json_error("reason is required", 400)
        record = get_services().penalties.reduce_penalty(user_id, points, reason, admin_id)
    except (KeyError, TypeError):
        return fail("user_id and points are required", 400)
    except ValueError as e:
        return not_found_or_bad_request(e)

    return jsonify({
        "success": True,
        "data": record.to_dict(),
        "summary": _summary(UserRepo.get_by_id(user_id)),
    })


@penalty_bp.post("/sweep")
@admin_required
def run_sweep():
    report = get_services().sweep.run()
    return jsonify({"success": True, "data": report.to_dict()})


@penalty_bp.get("/stats")
@admin_required
def penalty_stats():
    return jsonify({"success": True, "data": get_services().penalties.statistics()})
