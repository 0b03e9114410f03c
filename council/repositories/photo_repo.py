from council.extensions import db
from council.models.photo_upload import PhotoUpload


class PhotoRepo:
    @staticmethod
    def get(photo_id: int):
        return db.session.get(PhotoUpload, photo_id)

    @staticmethod
    def get_by_path(path: str):
        return PhotoUpload.query.filter_by(path=path).first()

    @staticmethod
    def list_by_rental(rental_id: int):
        return PhotoUpload.query.filter_by(rental_id=rental_id).order_by(PhotoUpload.id.asc()).all()

    @staticmethod
    def list_unverified():
        return PhotoUpload.query.filter_by(verified=False).order_by(PhotoUpload.id.asc()).all()

    @staticmethod
    def create(photo: PhotoUpload):
        db.session.add(photo)
        db.session.commit()
        return photo

    @staticmethod
    def update():
        db.session.commit()
