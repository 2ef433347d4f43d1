from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import date

from admin_console.schemas.validators import blank_to_none, required_text

INTERVENTION_STATUSES = ("active", "completed", "cancelled")


# --- Interventions ---
class InterventionUpdate(BaseModel):
    # update overwrites every column
    type: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = "active"
    notes: Optional[str] = None

    @field_validator("description", "start_date", "end_date", "notes", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("type")
    @classmethod
    def check_type(cls, value):
        return required_text(value, "Intervention type")

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        if value not in INTERVENTION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(INTERVENTION_STATUSES)}")
        return value

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    def payload(self) -> dict:
        return self.model_dump(mode="json")


class InterventionTypeForm(BaseModel):
    name: str
    description: Optional[str] = None
    default_duration: Optional[int] = None
    is_active: bool = True

    @field_validator("description", "default_duration", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return required_text(value, "Name")

    @field_validator("default_duration")
    @classmethod
    def check_duration(cls, value):
        if value is not None and value <= 0:
            raise ValueError("Default duration must be greater than 0")
        return value

    def payload(self) -> dict:
        data = self.model_dump()
        data["is_active"] = 1 if self.is_active else 0
        return data

