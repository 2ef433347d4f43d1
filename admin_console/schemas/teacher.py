from pydantic import BaseModel, field_validator
from typing import Optional

from admin_console.schemas.validators import blank_to_none, required_text, valid_email, valid_phone


# --- Teachers ---
class TeacherForm(BaseModel):
    name: str
    email: str
    password: Optional[str] = None
    employee_id: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("password", "employee_id", "phone", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        value = required_text(value, "Name")
        if not 2 <= len(value) <= 100:
            raise ValueError("Name must be between 2 and 100 characters")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return valid_email(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value):
        return valid_phone(value)

    @field_validator("employee_id")
    @classmethod
    def check_employee_id(cls, value):
        if value is not None and not 1 <= len(value) <= 50:
            raise ValueError("Employee ID must be between 1 and 50 characters")
        return value
