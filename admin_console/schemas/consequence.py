from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date

from admin_console.schemas.behaviour import SEVERITIES
from admin_console.schemas.validators import blank_to_none, required_text

CONSEQUENCE_STATUSES = ("pending", "completed", "cancelled")


# --- Consequences ---
class ConsequenceDefinitionForm(BaseModel):
    name: str
    description: Optional[str] = None
    severity: str = "low"
    default_duration: Optional[str] = None
    is_active: bool = True

    @field_validator("description", "default_duration", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("severity")
    @classmethod
    def check_severity(cls, value):
        if value not in SEVERITIES:
            raise ValueError("Severity must be low, medium, or high")
        return value

    def payload(self) -> dict:
        data = self.model_dump()
        data["is_active"] = 1 if self.is_active else 0
        return data


class ConsequenceUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
    due_date: Optional[date] = None
    completion_verified: Optional[bool] = None

    @field_validator("status", "due_date", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        if value is not None and value not in CONSEQUENCE_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(CONSEQUENCE_STATUSES)}")
        return value

    def changes(self) -> dict:
        # Only submitted fields; a cleared due date or notes is sent as null
        data = self.model_dump(mode="json", exclude_unset=True)
        for field in ("status", "completion_verified"):
            if field in data and data[field] is None:
                del data[field]
        return data
