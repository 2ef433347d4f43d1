from fastapi import APIRouter, Depends
from typing import Optional

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.behaviour import MeritTypeForm

router = APIRouter()


# Get merit types; pass is_active to hide retired ones
@router.get("")
def get_merit_types(is_active: Optional[bool] = None, context=Depends(admin_context)):
    params = {"is_active": "true" if is_active else "false"} if is_active is not None else None
    return context["api"].get_merit_types(params)


@router.post("")
def create_merit_type(merit_type: MeritTypeForm, context=Depends(admin_context)):
    return context["api"].create_merit_type(merit_type.payload())


@router.put("/{type_id}")
def update_merit_type(type_id: int, merit_type: MeritTypeForm, context=Depends(admin_context)):
    return context["api"].update_merit_type(type_id, merit_type.payload())


@router.delete("/{type_id}")
def delete_merit_type(type_id: int, context=Depends(admin_context)):
    context["api"].delete_merit_type(type_id)
    return {"message": "Merit type deleted successfully"}
