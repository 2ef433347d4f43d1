from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from admin_console.config import get_settings
from admin_console.dependencies.auth import admin_context
from admin_console.schemas.consequence import ConsequenceDefinitionForm, ConsequenceUpdate
from admin_console.services import summaries
from admin_console.services.school_api import fetch_all

logger = logging.getLogger(__name__)

router = APIRouter()


# Consequences page: student consequences with summary cards and charts
@router.get("")
def get_consequences(student_id: Optional[int] = None, status: Optional[str] = None,
                     context=Depends(admin_context)):
    api = context["api"]
    settings = get_settings()
    data = fetch_all(
        {
            "consequences": lambda: api.get_consequences({"student_id": student_id, "status": status}),
            "definitions": api.get_consequence_definitions,
        },
        tolerate=("definitions",),
    )
    consequences = data["consequences"]
    summary = summaries.consequence_summary(consequences)
    return {
        "consequences": consequences,
        "definitions": data["definitions"],
        "summary": summary,
        "status_chart": summaries.series({k: summary[k] for k in summaries.CONSEQUENCE_STATUSES}),
        "severity_chart": summaries.consequence_severity_chart(consequences),
        "trend": summaries.daily_trend(consequences, "assigned_date", settings.trend_days),
        "completion": summaries.completion_by_month(consequences),
    }


# -------- Definitions --------

@router.get("/definitions")
def get_definitions(context=Depends(admin_context)):
    return context["api"].get_consequence_definitions()


@router.post("/definitions")
def create_definition(definition: ConsequenceDefinitionForm, context=Depends(admin_context)):
    logger.info(f"Creating consequence definition {definition.name}")
    return context["api"].create_consequence_definition(definition.payload())


@router.put("/definitions/{definition_id}")
def update_definition(definition_id: int, definition: ConsequenceDefinitionForm, context=Depends(admin_context)):
    return context["api"].update_consequence_definition(definition_id, definition.payload())


@router.delete("/definitions/{definition_id}")
def delete_definition(definition_id: int, context=Depends(admin_context)):
    context["api"].delete_consequence_definition(definition_id)
    return {"message": "Consequence definition deleted successfully"}


# -------- Student consequences --------

@router.get("/{consequence_id}")
def get_consequence(consequence_id: int, context=Depends(admin_context)):
    return context["api"].get_consequence(consequence_id)


@router.put("/{consequence_id}")
def update_consequence(consequence_id: int, consequence: ConsequenceUpdate, context=Depends(admin_context)):
    data = consequence.changes()
    if not data:
        raise HTTPException(status_code=400, detail="No changes submitted")
    return context["api"].update_consequence(consequence_id, data)


@router.put("/{consequence_id}/complete")
def complete_consequence(consequence_id: int, context=Depends(admin_context)):
    logger.info(f"Consequence {consequence_id} marked completed")
    return context["api"].complete_consequence(consequence_id)


@router.delete("/{consequence_id}")
def delete_consequence(consequence_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting consequence {consequence_id}")
    context["api"].delete_consequence(consequence_id)
    return {"message": "Consequence deleted successfully"}
