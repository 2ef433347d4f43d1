from pydantic import BaseModel, field_validator
from datetime import date
from typing import Optional

from admin_console.schemas.validators import blank_to_none, required_text, valid_time

SEVERITIES = ("low", "medium", "high")
INCIDENT_STATUSES = ("pending", "approved", "rejected", "resolved")


def _valid_severity(value: str) -> str:
    if value not in SEVERITIES:
        raise ValueError("Severity must be low, medium, or high")
    return value


# --- Incidents ---
class IncidentUpdate(BaseModel):
    status: Optional[str] = None
    severity: Optional[str] = None
    points: Optional[int] = None
    incident_type: Optional[str] = None
    incident_date: Optional[date] = None
    incident_time: Optional[str] = None
    admin_notes: Optional[str] = None
    description: Optional[str] = None

    @field_validator("status", "severity", "incident_type", "incident_date", "incident_time", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        if value is not None and value not in INCIDENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(INCIDENT_STATUSES)}")
        return value

    @field_validator("severity")
    @classmethod
    def check_severity(cls, value):
        return _valid_severity(value) if value is not None else None

    @field_validator("points")
    @classmethod
    def check_points(cls, value):
        if value is not None and value < 0:
            raise ValueError("Points cannot be negative")
        return value

    @field_validator("incident_time")
    @classmethod
    def check_time(cls, value):
        return valid_time(value, "Incident time")

    def changes(self) -> dict:
        # Only submitted fields; notes and description may be cleared to ""
        data = self.model_dump(mode="json", exclude_unset=True)
        for field in ("admin_notes", "description"):
            if field in data and data[field] is None:
                data[field] = ""
        return {key: value for key, value in data.items() if value is not None}


class IncidentReview(BaseModel):
    admin_notes: Optional[str] = None


# --- Merits ---
class MeritForm(BaseModel):
    student_id: int
    merit_type: str
    points: int = 1
    description: Optional[str] = None
    date: Optional[str] = None

    @field_validator("description", "date", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("merit_type")
    @classmethod
    def check_merit_type(cls, value):
        return required_text(value, "Merit type")

    @field_validator("points")
    @classmethod
    def check_points(cls, value):
        if value < 1:
            raise ValueError("Points must be at least 1")
        return value


# --- Incident & merit types ---
class IncidentTypeForm(BaseModel):
    name: str
    default_points: int = 0
    default_severity: str = "low"
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("description", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("default_points")
    @classmethod
    def check_points(cls, value):
        if value < 0:
            raise ValueError("Default points cannot be negative")
        return value

    @field_validator("default_severity")
    @classmethod
    def check_severity(cls, value):
        return _valid_severity(value)

    def payload(self) -> dict:
        data = self.model_dump()
        data["is_active"] = 1 if self.is_active else 0
        return data


class MeritTypeForm(BaseModel):
    name: str
    default_points: int = 1
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("description", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("default_points")
    @classmethod
    def check_points(cls, value):
        if value < 0:
            raise ValueError("Default points cannot be negative")
        return value

    def payload(self) -> dict:
        data = self.model_dump()
        data["is_active"] = 1 if self.is_active else 0
        return data
