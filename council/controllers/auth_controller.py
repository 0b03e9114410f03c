from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from council.services.auth_service import AuthService
from council.repositories.user_repo import UserRepo
from council.utils.http import json_body, fail, json_error

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register", endpoint="auth_register")
def register():
    data = json_body()

    username = (data.get("username") or "").strip()
    email = (data.get("email") or "").strip()
    password = (data.get("password") or "").strip()

    if not username or not email or not password:
        return json_error("username/email/password are required", 400)

    try:
        user = AuthService.register(
            username=username,
            email=email,
            password=password,
            role="student",  # never taken from the request
            name=data.get("name"),
            student_id=data.get("student_id"),
            phone=data.get("phone"),
            campus=data.get("campus"),
            department=data.get("department"),
        )
        return jsonify({"success": True, "id": user.id, "username": user.username, "role": user.role}), 201
    except ValueError as e:
        return fail(e, 400)


@auth_bp.post("/login", endpoint="auth_login")
def login():
    data = json_body()
    try:
        token, user = AuthService.login(
            (data.get("username") or "").strip(),
            (data.get("password") or "").strip()
        )
        return jsonify({
            "success": True,
            "access_token": token,
            "user": {"id": user.id, "username": user.username, "role": user.role}
        })
    except ValueError as e:
        return json_error(str(e), 401)


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    user_id = int(get_jwt_identity())
    claims = get_jwt()
    user = UserRepo.get_by_id(user_id)
    if not user:
        return json_error("User not found", 404)

    data = user.to_dict()
    data["role"] = claims.get("role", user.role)
    return jsonify({"success": True, "user": data})
