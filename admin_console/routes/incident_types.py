from fastapi import APIRouter, Depends
from typing import Optional

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.behaviour import IncidentTypeForm

router = APIRouter()


# Get incident types; pass is_active to hide retired ones
@router.get("")
def get_incident_types(is_active: Optional[bool] = None, context=Depends(admin_context)):
    params = {"is_active": "true" if is_active else "false"} if is_active is not None else None
    return context["api"].get_incident_types(params)


@router.post("")
def create_incident_type(incident_type: IncidentTypeForm, context=Depends(admin_context)):
    return context["api"].create_incident_type(incident_type.payload())


@router.put("/{type_id}")
def update_incident_type(type_id: int, incident_type: IncidentTypeForm, context=Depends(admin_context)):
    return context["api"].update_incident_type(type_id, incident_type.payload())


@router.delete("/{type_id}")
def delete_incident_type(type_id: int, context=Depends(admin_context)):
    context["api"].delete_incident_type(type_id)
    return {"message": "Incident type deleted successfully"}
