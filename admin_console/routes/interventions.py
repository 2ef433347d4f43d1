from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.intervention import InterventionTypeForm, InterventionUpdate
from admin_console.services.school_api import fetch_all
from admin_console.services.summaries import intervention_stats
from admin_console.utils.filters import filtered_view, search

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("student_name", "student_id", "type", "assigned_by_name")


# Interventions page: records, types for the edit form, status counts
@router.get("")
def get_interventions(
    student_id: Optional[int] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    search_term: Optional[str] = Query(None, alias="search"),
    context=Depends(admin_context),
):
    api = context["api"]
    params = {"student_id": student_id, "status": status, "type": type}
    data = fetch_all(
        {
            "interventions": lambda: api.get_interventions(params),
            "types": api.get_intervention_types,
        },
        tolerate=("types",),
    )
    interventions = data["interventions"]
    return {
        **filtered_view(search(interventions, search_term, SEARCH_FIELDS), len(interventions)),
        "types": data["types"],
        "stats": intervention_stats(interventions),
    }


# -------- Intervention types --------

@router.get("/types")
def get_intervention_types(context=Depends(admin_context)):
    return context["api"].get_intervention_types()


@router.post("/types")
def create_intervention_type(intervention_type: InterventionTypeForm, context=Depends(admin_context)):
    logger.info(f"Creating intervention type {intervention_type.name}")
    return context["api"].create_intervention_type(intervention_type.payload())


@router.put("/types/{type_id}")
def update_intervention_type(type_id: int, intervention_type: InterventionTypeForm, context=Depends(admin_context)):
    return context["api"].update_intervention_type(type_id, intervention_type.payload())


@router.delete("/types/{type_id}")
def delete_intervention_type(type_id: int, context=Depends(admin_context)):
    context["api"].delete_intervention_type(type_id)
    return {"message": "Intervention type deleted successfully"}


# -------- Interventions --------

@router.get("/{intervention_id}")
def get_intervention(intervention_id: int, context=Depends(admin_context)):
    return context["api"].get_intervention(intervention_id)


@router.put("/{intervention_id}")
def update_intervention(intervention_id: int, intervention: InterventionUpdate, context=Depends(admin_context)):
    return context["api"].update_intervention(intervention_id, intervention.payload())


@router.delete("/{intervention_id}")
def delete_intervention(intervention_id: int, context=Depends(admin_context)):
    logger.info(f"Deleting intervention {intervention_id}")
    context["api"].delete_intervention(intervention_id)
    return {"message": "Intervention deleted successfully"}
