from pydantic import BaseModel, Field, field_validator
from typing import Optional

from admin_console.schemas.validators import blank_to_none, required_text
from admin_console.utils.dates import academic_year as current_academic_year


# --- Classes ---
class ClassForm(BaseModel):
    class_name: str
    grade_level: Optional[str] = None
    teacher_id: Optional[int] = None
    academic_year: Optional[str] = Field(default_factory=current_academic_year)

    @field_validator("grade_level", "teacher_id", "academic_year", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)

    @field_validator("class_name")
    @classmethod
    def check_class_name(cls, value):
        return required_text(value, "Class name")

    @field_validator("academic_year")
    @classmethod
    def default_academic_year(cls, value):
        return value or current_academic_year()


class TeacherAssignment(BaseModel):
    teacher_id: Optional[int] = None

    @field_validator("teacher_id", mode="before")
    @classmethod
    def empty_is_none(cls, value):
        return blank_to_none(value)
