from datetime import datetime
from pydantic import BaseModel, Field, EmailStr
from typing import Literal

from ngohub.models.common import new_id, utcnow


UserRole = Literal["user", "admin"]

class User(BaseModel):
    user_id: str = Field(default_factory=new_id)
    name: str
    email: EmailStr
    password_hash: str
    phone: str | None = None
    role: UserRole = "user"
    is_verified: bool = False
    profile_image: str | None = None

    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
