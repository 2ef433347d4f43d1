from fastapi import APIRouter, Depends, Query
from typing import Optional

from admin_console.dependencies.auth import admin_context
from admin_console.utils.filters import filtered_view, search

router = APIRouter()

SEARCH_FIELDS = ("name", "email", "phone")


# Get all parents; children_count is missing for parents with no linked children
@router.get("")
def get_parents(search_term: Optional[str] = Query(None, alias="search"), context=Depends(admin_context)):
    parents = [
        {**parent, "children_count": parent.get("children_count") or 0}
        for parent in context["api"].get_parents()
    ]
    return filtered_view(search(parents, search_term, SEARCH_FIELDS), len(parents))


# Get single parent with linked children
@router.get("/{parent_id}")
def get_parent(parent_id: int, context=Depends(admin_context)):
    return context["api"].get_parent(parent_id)
