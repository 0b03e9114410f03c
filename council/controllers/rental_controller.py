from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from council.services.context import get_services
from council.utils.decorators import admin_required, current_identity, is_admin_role
from council.utils.http import json_body, fail, not_found_or_bad_request

rental_bp = Blueprint("rentals", __name__)


@rental_bp.post("/", strict_slashes=False)
@jwt_required()
def checkout():
    user_id, _role = current_identity()
    data = json_body()
    try:
        item_id = int(data["item_id"])
        rental, lockbox = get_services().rentals.checkout(
            user_id,
            item_id,
            purpose=(data.get("purpose") or "").strip(),
            phone_number=(data.get("phone_number") or "").strip() or None,
        )
    except (KeyError, TypeError):
        return fail("item_id is required", 400)
    except ValueError as e:
        return fail(e, 400)

    body = {"success": True, "data": rental.to_dict(), "lockbox": None}
    if lockbox:
        body["lockbox"] = {"location": lockbox.location, "password": lockbox.current_password}
    return jsonify(body), 201


@rental_bp.get("/eligibility")
@jwt_required()
def eligibility():
    user_id, _role = current_identity()
    verdict = get_services().penalties.check_eligibility(user_id)
    return jsonify({"success": True, "data": verdict.to_dict()})


@rental_bp.get("/my")
@jwt_required()
def my_rentals():
    user_id, _role = current_identity()
    rentals = get_services().rentals.list_for_user(user_id)
    return jsonify({"success": True, "data": [r.to_dict() for r in rentals]})


@rental_bp.get("/", strict_slashes=False)
@admin_required
def all_rentals():
    rentals = get_services().rentals.list_all(request.args.get("status"))
    return jsonify({"success": True, "data": [r.to_dict() for r in rentals]})


@rental_bp.post("/<int:rental_id>/return")
@jwt_required()
def return_rental(rental_id: int):
    user_id, role = current_identity()
    data = json_body()
    try:
        rental = get_services().rentals.process_return(
            rental_id,
            user_id,
            is_admin=is_admin_role(role),
            rating=data.get("rating"),
            feedback=data.get("feedback"),
        )
        return jsonify({"success": True, "data": rental.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)


@rental_bp.post("/<int:rental_id>/lost")
@admin_required
def mark_lost(rental_id: int):
    data = json_body()
    reason = (data.get("reason") or "").strip()
    if not reason:
        return fail("reason is required", 400)
    try:
        rental = get_services().rentals.mark_lost(rental_id, reason)
        return jsonify({"success": True, "data": rental.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)


@rental_bp.post("/<int:rental_id>/damaged")
@admin_required
def mark_damaged(rental_id: int):
    data = json_body()
    reason = (data.get("reason") or "").strip()
    if not reason:
        return fail("reason is required", 400)
    try:
        rental = get_services().rentals.mark_damaged(rental_id, reason, data.get("severity", "minor"))
        return jsonify({"success": True, "data": rental.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)
