from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional

IMPORT_MODES = ("create", "update", "upsert")


# --- Bulk import ---
class BulkImportResult(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[Any] = Field(default_factory=list)


class ImportOptions(BaseModel):
    mode: str = "upsert"
    autoCreateClasses: bool = True
    useSheetNames: bool = True
    academicYear: Optional[str] = None

    @field_validator("mode")
    @classmethod
    def check_mode(cls, value):
        if value not in IMPORT_MODES:
            raise ValueError(f"Mode must be one of: {', '.join(IMPORT_MODES)}")
        return value

    def as_form(self, kind: str) -> dict:
        """Multipart form fields the v2 import accepts for ``kind``."""
        form = {"mode": self.mode}
        if kind == "students":
            form["autoCreateClasses"] = "true" if self.autoCreateClasses else "false"
            form["useSheetNames"] = "true" if self.useSheetNames else "false"
        if kind in ("students", "classes") and self.academicYear:
            form["academicYear"] = self.academicYear
        return form


class ImportErrors(BaseModel):
    errors: List[Any] = Field(..., min_length=1)
