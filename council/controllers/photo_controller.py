from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from council.services.context import get_services
from council.services.photo_service import PhotoService
from council.utils.decorators import admin_required, current_identity, is_admin_role
from council.utils.http import json_body, fail, not_found_or_bad_request

photo_bp = Blueprint("photos", __name__)


@photo_bp.post("/rentals/<int:rental_id>/photos")
@jwt_required()
def upload_photo(rental_id: int):
    user_id, role = current_identity()
    try:
        photo = PhotoService(get_services().storage).upload(
            rental_id,
            user_id,
            request.form.get("type", ""),
            request.files.get("file"),
            is_admin=is_admin_role(role),
        )
        return jsonify({"success": True, "data": photo.to_dict()}), 201
    except ValueError as e:
        return not_found_or_bad_request(e)


@photo_bp.get("/rentals/<int:rental_id>/photos")
@jwt_required()
def list_photos(rental_id: int):
    user_id, role = current_identity()
    try:
        rental = get_services().rentals.get(rental_id)
    except ValueError as e:
        return fail(e, 404)
    if not is_admin_role(role) and rental.user_id != user_id:
        return fail("Forbidden", 403)
    photos = PhotoService.list_for_rental(rental_id)
    return jsonify({"success": True, "data": [p.to_dict() for p in photos]})


@photo_bp.get("/photos/unverified")
@admin_required
def unverified_photos():
    return jsonify({"success": True, "data": [p.to_dict() for p in PhotoService.list_unverified()]})


@photo_bp.post("/photos/<int:photo_id>/verify")
@admin_required
def verify_photo(photo_id: int):
    admin_id, _role = current_identity()
    data = json_body()
    try:
        photo = PhotoService.verify(photo_id, admin_id, notes=data.get("notes"))
        return jsonify({"success": True, "data": photo.to_dict()})
    except ValueError as e:
        return fail(e, 404)
