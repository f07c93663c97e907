import logging

from ngohub.core.errors import ConflictError, ValidationError
from ngohub.core.security import create_access_token, hash_password, verify_password
from ngohub.data_access.dynamodb import DuplicateEmailError, DynamoDataAccess
from ngohub.models.user import User
from ngohub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, data_access: DynamoDataAccess, notification_service: NotificationService):
        self.data_access = data_access
        self.notification_service = notification_service

    def register(self, name: str, email: str, password: str,
                 phone: str | None = None) -> tuple[User, str]:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=phone
        )
        try:
            self.data_access.create_user(user)
        except DuplicateEmailError as e:
            raise ConflictError("User already exists with this email") from e

        logger.info(f"Registered user {user.user_id}", extra={"user_id": user.user_id})
        self.notification_service.send_welcome(user.email, user.name)
        return user, create_access_token(user.user_id, user.email)

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self.data_access.get_user_by_email(email)
        # Same message for unknown email and wrong password.
        if user is None or not verify_password(password, user.password_hash):
            raise ValidationError("Invalid credentials")
        return user, create_access_token(user.user_id, user.email)
