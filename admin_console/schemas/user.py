from pydantic import BaseModel, field_validator, model_validator
from typing import Optional

from admin_console.schemas.validators import (
    MIN_PASSWORD_LENGTH,
    ROLES,
    required_text,
    valid_email,
    valid_password,
)


def _valid_role(value: str) -> str:
    if value not in ROLES:
        raise ValueError("Invalid role. Must be admin, teacher, or parent")
    return value


# --- Users (admin-created accounts) ---
class UserCreate(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: Optional[str] = None
    role: str

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return valid_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value):
        return valid_password(value)

    @field_validator("role")
    @classmethod
    def check_role(cls, value):
        return _valid_role(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def check_role(cls, value):
        return _valid_role(value)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @model_validator(mode="after")
    def check_passwords(self):
        if not self.current_password or not self.new_password or not self.confirm_password:
            raise ValueError("All password fields are required")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        if self.new_password == self.current_password:
            raise ValueError("New password must be different from current password")
        return self


class ProfileUpdate(BaseModel):
    name: str
    email: str

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return valid_email(value)
