from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from council.models.enums import Campus, UserRole
from council.models.user import User
from council.repositories.user_repo import UserRepo


class AuthService:
    @staticmethod
    def register(username: str, email: str, password: str, role: str = UserRole.STUDENT.value, **profile):
        if UserRepo.get_by_username(username) or UserRepo.get_by_email(email):
            raise ValueError("Username or e-mail is already registered")

        student_id = (profile.get("student_id") or "").strip() or None
        if student_id and UserRepo.get_by_student_id(student_id):
            raise ValueError("Student ID is already registered")

        campus = profile.get("campus")
        if campus:
            campus = Campus(campus).value

        user = User(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=UserRole(role).value,
            name=(profile.get("name") or username).strip(),
            student_id=student_id,
            phone=profile.get("phone"),
            campus=campus,
            department=profile.get("department"),
        )
        UserRepo.create(user)
        return user

    @staticmethod
    def login(username: str, password: str):
        user = UserRepo.get_by_username(username)
        if not user or not check_password_hash(user.password_hash, password):
            raise ValueError("Invalid username or password")
        if not user.is_active:
            raise ValueError("This account is disabled")

        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username}
        )
        return token, user
