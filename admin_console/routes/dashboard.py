from fastapi import APIRouter, Depends

from admin_console.dependencies.auth import admin_context
from admin_console.services.school_api import fetch_all

router = APIRouter()


# Dashboard landing page: stats cards plus the unread notification feed
@router.get("")
def get_dashboard(context=Depends(admin_context)):
    api = context["api"]
    data = fetch_all({
        "stats": api.get_dashboard_stats,
        "notifications": lambda: api.get_notifications({"unread_only": "true", "limit": 5}),
        "unread": api.get_unread_count,
    })
    unread = data["unread"]
    return {
        "stats": data["stats"] or {},
        "notifications": data["notifications"],
        "unread_count": unread.get("count", 0) if isinstance(unread, dict) else unread or 0,
    }
