# council/controllers/item_controller.py

from flask import Blueprint, request, jsonify
from council.services.item_service import ItemService
from council.utils.decorators import admin_required
from council.utils.http import json_body, fail, not_found_or_bad_request

item_bp = Blueprint("items", __name__)


@item_bp.get("/", strict_slashes=False)
def list_items():
    items = ItemService.list_items(
        status=request.args.get("status"),
        campus=request.args.get("campus"),
        category=request.args.get("category"),
    )
    return jsonify({"success": True, "data": [i.to_dict() for i in items]})


@item_bp.get("/stats")
def item_stats():
    return jsonify({"success": True, "data": ItemService.statistics()})


@item_bp.get("/<int:item_id>")
def get_item(item_id: int):
    try:
        return jsonify({"success": True, "data": ItemService.get_item(item_id).to_dict()})
    except ValueError as e:
        return fail(e, 404)


@item_bp.get("/tag/<string:unique_id>")
def get_item_by_tag(unique_id: str):
    try:
        return jsonify({"success": True, "data": ItemService.get_by_tag(unique_id).to_dict()})
    except ValueError as e:
        return fail(e, 404)


@item_bp.post("/", strict_slashes=False)
@admin_required
def create_item():
    data = json_body()
    try:
        item = ItemService.create_item(data)
        return jsonify({"success": True, "id": item.id}), 201
    except KeyError:
        return fail("unique_id, name and campus are required", 400)
    except ValueError as e:
        return fail(e, 400)


@item_bp.put("/<int:item_id>")
@admin_required
def update_item(item_id: int):
    data = json_body()
    try:
        item = ItemService.update_item(item_id, data)
        return jsonify({"success": True, "data": item.to_dict()})
    except ValueError as e:
        return not_found_or_bad_request(e)


@item_bp.delete("/<int:item_id>")
@admin_required
def delete_item(item_id: int):
    try:
        ItemService.delete_item(item_id)
        return jsonify({"success": True})
    except ValueError as e:
        return not_found_or_bad_request(e)
