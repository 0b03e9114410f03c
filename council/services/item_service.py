from council.models.enums import Campus, ItemStatus
from council.models.rental_item import RentalItem
from council.repositories.item_repo import ItemRepo
from council.repositories.rental_repo import RentalRepo

_EDITABLE = ["name", "category", "description", "image", "condition", "location", "contact"]


def _campus(value):
    try:
        return Campus(value).value
    except ValueError:
        raise ValueError("campus must be yangsan or jangjeom")


class ItemService:
    @staticmethod
    def list_items(status: str = None, campus: str = None, category: str = None):
        return ItemRepo.list_all(status=status, campus=campus, category=category)

    @staticmethod
    def get_item(item_id: int):
        item = ItemRepo.get(item_id)
        if not item:
            raise ValueError("Item not found")
        return item

    @staticmethod
    def get_by_tag(unique_id: str):
        item = ItemRepo.get_by_unique_id(unique_id)
        if not item:
            raise ValueError("Item not found")
        return item

    @staticmethod
    def create_item(data: dict):
        unique_id = (data.get("unique_id") or "").strip()
        if not unique_id or not data.get("name"):
            raise KeyError("unique_id")
        if ItemRepo.get_by_unique_id(unique_id):
            raise ValueError("An item with this tag already exists")

        item = RentalItem(
            unique_id=unique_id,
            name=data["name"],
            campus=_campus(data.get("campus")),
            category=data.get("category", ""),
            description=data.get("description"),
            image=data.get("image"),
            condition=data.get("condition", "good"),
            location=data.get("location", ""),
            contact=data.get("contact"),
            status=ItemStatus.AVAILABLE.value,
        )
        return ItemRepo.create(item)

    @staticmethod
    def update_item(item_id: int, data: dict):
        item = ItemService.get_item(item_id)
        for k in _EDITABLE:
            if k in data:
                setattr(item, k, data[k])

        if "campus" in data:
            item.campus = _campus(data["campus"])
        if "status" in data:
            status = ItemStatus(data["status"]).value
            if status == ItemStatus.RENTED.value and item.status != status:
                raise ValueError("Items become rented only through a checkout")
            if item.status == ItemStatus.RENTED.value and status != item.status:
                raise ValueError("Item is rented; close the rental first")
            item.status = status

        ItemRepo.update()
        return item

    @staticmethod
    def delete_item(item_id: int):
        item = ItemService.get_item(item_id)
        if RentalRepo.find_active_for_item(item.id):
            raise ValueError("This item has an active rental. Close it first.")
        ItemRepo.delete(item)

    @staticmethod
    def statistics():
        items = ItemRepo.list_all()
        available = sum(1 for i in items if i.status == ItemStatus.AVAILABLE.value)
        rented = sum(1 for i in items if i.status == ItemStatus.RENTED.value)
        return {
            "total": len(items),
            "available": available,
            "rented": rented,
            "other": len(items) - available - rented,
        }
