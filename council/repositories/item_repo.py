from council.models.rental_item import RentalItem
from council.extensions import db


class ItemRepo:
    @staticmethod
    def list_all(status: str = None, campus: str = None, category: str = None):
        q = RentalItem.query
        if status:
            q = q.filter_by(status=status)
        if campus:
            q = q.filter_by(campus=campus)
        if category:
            q = q.filter_by(category=category)
        return q.order_by(RentalItem.id.desc()).all()

    @staticmethod
    def get(item_id: int):
        return db.session.get(RentalItem, item_id)

    @staticmethod
    def get_by_unique_id(unique_id: str):
        return RentalItem.query.filter_by(unique_id=unique_id).first()

    @staticmethod
    def create(item: RentalItem):
        db.session.add(item)
        db.session.commit()
        return item

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(item: RentalItem):
        db.session.delete(item)
        db.session.commit()
