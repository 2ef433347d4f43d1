from fastapi import Depends, Header, HTTPException
from supabase import create_client
from typing import Optional
import time
import logging

from admin_console.config import get_settings, Settings
from admin_console.services.school_api import SchoolApi, SchoolApiError

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token format")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid token format")
    return token


def _user_from_backend(api: SchoolApi) -> dict:
    try:
        me = api.get_me()
    except SchoolApiError as e:
        logger.error(f"Backend token validation error: {e.message}")
        if e.status_code == 504:
            raise HTTPException(
                status_code=504,
                detail="Connection to authentication service timed out. Please try again later."
            )
        raise HTTPException(status_code=401, detail=f"Authentication error: {e.message}")

    user = (me or {}).get("user") if isinstance(me, dict) else None
    if not user:
        logger.warning("User not found after successful token validation")
        raise HTTPException(status_code=401, detail="User not found")
    return user


def _user_from_supabase(token: str, settings: Settings) -> dict:
    if not settings.supabase_url or not settings.supabase_key:
        logger.error("Supabase URL or Key not found in environment variables")
        raise HTTPException(status_code=500, detail="Server configuration error")

    try:
        start_time = time.time()
        logger.info("Validating token with Supabase")
        supabase = create_client(settings.supabase_url, settings.supabase_key)
        user_res = supabase.auth.get_user(token)
        logger.info(f"Token validation completed in {time.time() - start_time:.2f} seconds")
    except Exception as e:
        logger.error(f"Supabase token validation error: {str(e)}")
        if "timed out" in str(e).lower():
            raise HTTPException(
                status_code=504,
                detail="Connection to authentication service timed out. Please try again later."
            )
        raise HTTPException(status_code=401, detail=f"Authentication error: {str(e)}")

    if not user_res or not user_res.user:
        logger.warning("User not found after successful token validation")
        raise HTTPException(status_code=401, detail="User not found")

    profile = supabase \
        .table("user_profiles") \
        .select("*") \
        .eq("id", user_res.user.id) \
        .execute().data
    if not profile:
        logger.warning(f"No profile row for Supabase user {user_res.user.id}")
        raise HTTPException(status_code=401, detail="User profile not found")

    return {
        "id": user_res.user.id,
        "email": user_res.user.email,
        "name": profile[0].get("full_name") or profile[0].get("name"),
        "role": profile[0].get("role"),
        "school_id": profile[0].get("school_id"),
    }


def admin_context(
    authorization: Optional[str] = Header(None),
    x_school_id: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
):
    token = _bearer_token(authorization)

    api = SchoolApi(
        settings.school_api_url,
        token,
        school_id=x_school_id,
        timeout=settings.school_api_timeout,
    )
    try:
        if settings.auth_provider == "supabase":
            user = _user_from_supabase(token, settings)
        else:
            user = _user_from_backend(api)

        if user.get("role") not in settings.admin_roles:
            logger.warning(f"User {user.get('id')} with role {user.get('role')} denied admin access")
            raise HTTPException(status_code=403, detail="Admin access required")

        logger.info(f"Successfully authenticated admin user: {user.get('id')}")
        yield {
            "api": api,
            "user": user,
            "user_id": user.get("id"),
            "school_id": x_school_id or user.get("school_id"),
        }
    finally:
        api.close()
