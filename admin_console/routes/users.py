from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.user import PasswordChange, ProfileUpdate, RoleUpdate, UserCreate
from admin_console.services.summaries import user_role_stats
from admin_console.utils.filters import filtered_view, match_field, search

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("name", "email")


def _is_self(context, user_id: int) -> bool:
    return str(context["user_id"]) == str(user_id)


# Get all user accounts with per-role counts
@router.get("")
def get_users(search_term: Optional[str] = Query(None, alias="search"), role: Optional[str] = None,
              context=Depends(admin_context)):
    users = context["api"].get_users()
    filtered = match_field(search(users, search_term, SEARCH_FIELDS), "role", role)
    return {**filtered_view(filtered, len(users)), "stats": user_role_stats(users)}


# -------- Own account --------

@router.put("/me/profile")
def update_profile(profile: ProfileUpdate, context=Depends(admin_context)):
    return context["api"].update_profile(profile.model_dump())


@router.put("/me/password")
def change_password(passwords: PasswordChange, context=Depends(admin_context)):
    context["api"].change_password(passwords.current_password, passwords.new_password)
    logger.info(f"Password changed for user {context['user_id']}")
    return {"message": "Password changed successfully"}


# -------- Other accounts --------

@router.get("/{user_id}")
def get_user(user_id: int, context=Depends(admin_context)):
    return context["api"].get_user(user_id)


@router.post("")
def create_user(user: UserCreate, context=Depends(admin_context)):
    logger.info(f"Creating {user.role} account for {user.email}")
    return context["api"].create_user(user.model_dump(exclude={"confirm_password"}))


@router.put("/{user_id}/role")
def update_role(user_id: int, update: RoleUpdate, context=Depends(admin_context)):
    if _is_self(context, user_id):
        raise HTTPException(status_code=400, detail="Cannot change your own role")
    logger.info(f"Changing role of user {user_id} to {update.role}")
    return context["api"].update_user_role(user_id, update.role)


@router.delete("/{user_id}")
def delete_user(user_id: int, context=Depends(admin_context)):
    if _is_self(context, user_id):
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    logger.info(f"Deleting user {user_id}")
    context["api"].delete_user(user_id)
    return {"message": "User deleted successfully"}
