from flask import current_app

from council.models.enums import PhotoType
from council.models.photo_upload import PhotoUpload
from council.repositories.photo_repo import PhotoRepo
from council.repositories.rental_repo import RentalRepo
from council.utils.timeutil import utcnow


class PhotoService:
    def __init__(self, storage):
        self.storage = storage

    def upload(self, rental_id: int, user_id: int, photo_type: str, file_storage, is_admin: bool = False):
        rental = RentalRepo.get(rental_id)
        if not rental:
            raise ValueError("Rental not found")
        if not is_admin and rental.user_id != user_id:
            raise ValueError("This rental does not belong to you")
        try:
            photo_type = PhotoType(photo_type).value
        except ValueError:
            raise ValueError(f"Unknown photo type: {photo_type}")

        blob = self.storage.upload(
            f"rentals/{rental.id}/{photo_type}",
            file_storage,
            allowed_types=current_app.config.get("ALLOWED_UPLOAD_TYPES"),
            max_bytes=current_app.config.get("MAX_CONTENT_LENGTH"),
        )
        photo = PhotoUpload(
            rental_id=rental.id,
            user_id=rental.user_id,
            type=photo_type,
            url=blob.url,
            path=blob.path,
            size=blob.size,
            content_type=blob.content_type,
        )
        return PhotoRepo.create(photo)

    @staticmethod
    def list_for_rental(rental_id: int):
        return PhotoRepo.list_by_rental(rental_id)

    @staticmethod
    def get_by_path(path: str):
        photo = PhotoRepo.get_by_path(path)
        if not photo:
            raise ValueError("Photo not found")
        return photo

    @staticmethod
    def list_unverified():
        return PhotoRepo.list_unverified()

    @staticmethod
    def verify(photo_id: int, admin_id, notes: str = None):
        photo = PhotoRepo.get(photo_id)
        if not photo:
            raise ValueError("Photo not found")
        photo.verified = True
        photo.verified_by = str(admin_id)
        photo.verified_at = utcnow()
        photo.notes = notes
        PhotoRepo.update()
        return photo
