import os

from flask import Flask, jsonify, send_from_directory

from council.config import Config
from council.extensions import db, migrate, jwt, mail


def _register_models():
    # table metadata must be known before create_all / migrations
    from council.models import (  # noqa: F401
        content,
        lockbox_password,
        outbox_event,
        penalty_record,
        photo_upload,
        rental_application,
        rental_item,
        user,
    )


def create_app(config_object=Config, clock=None, http_client=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # 1) extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    _register_models()
    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    # 2) explicit service instances, looked up per request via get_services()
    from council.services.context import build_services
    from council.utils.timeutil import utcnow
    app.extensions["council.services"] = build_services(
        app.config, clock=clock or utcnow, http_client=http_client
    )

    # 3) blueprints
    from council.controllers.auth_controller import auth_bp
    from council.controllers.item_controller import item_bp
    from council.controllers.rental_controller import rental_bp
    from council.controllers.photo_controller import photo_bp
    from council.controllers.penalty_controller import penalty_bp
    from council.controllers.notification_controller import notif_bp
    from council.controllers.content_controller import notice_bp, event_bp
    from council.controllers.admin_controller import admin_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(item_bp, url_prefix="/items")
    app.register_blueprint(rental_bp, url_prefix="/rentals")
    app.register_blueprint(photo_bp)
    app.register_blueprint(penalty_bp, url_prefix="/penalties")
    app.register_blueprint(notif_bp, url_prefix="/notifications")
    app.register_blueprint(notice_bp, url_prefix="/notices")
    app.register_blueprint(event_bp, url_prefix="/events")
    app.register_blueprint(admin_bp)

    from flask_jwt_extended import jwt_required
    from council.services.photo_service import PhotoService
    from council.utils.decorators import current_identity, is_admin_role
    from council.utils.http import json_error

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get(f"{app.config['UPLOAD_URL_PREFIX'].rstrip('/')}/<path:path>")
    @jwt_required()
    def uploaded_file(path):
        # only the uploader and admins may fetch a stored photo
        user_id, role = current_identity()
        try:
            photo = PhotoService.get_by_path(path)
        except ValueError as e:
            return json_error(str(e), 404)
        if not is_admin_role(role) and photo.user_id != user_id:
            return json_error("Forbidden", 403)
        return send_from_directory(os.path.abspath(app.config["UPLOAD_FOLDER"]), photo.path)

    # 4) optional background sweep
    from council.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
