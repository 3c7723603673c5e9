"""
Public search endpoints.

A valid token is optional; when present the caller is recorded on search log
events. A bad token is treated as no token.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, SUGGESTIONS_DEFAULT, TOP_N_DEFAULT
from core.models import User
from core.search import PageRequest, SearchFilters, service

from ..auth.dependencies import get_optional_user
from ..database import get_db
from ..dependencies import pagination, result_limit

router = APIRouter(prefix="/search", tags=["search"])


@router.get("")
def search(
    q: str | None = Query(default=None),
    search_type: str | None = Query(default="all", alias="type"),
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    """
    Search profiles, projects and skills.

    ``type`` narrows the result to one kind: all, profiles, projects or skills.
    """
    viewer_id = viewer.id if viewer else None
    data = service.unified_search(db, q, search_type, paging, viewer_id=viewer_id)
    return {"success": True, "data": data}


@router.get("/suggestions")
def suggestions(
    q: str | None = Query(default=None),
    limit: int = Depends(result_limit(SUGGESTIONS_DEFAULT)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.search_suggestions(db, q, limit)}


@router.get("/advanced")
def advanced_search(
    q: str | None = Query(default=None),
    skills: str | None = Query(default=None),
    location: str | None = Query(default=None),
    education: str | None = Query(default=None),
    project_tech: str | None = Query(default=None, alias="projectTech"),
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    """Profile search combining free text with skill, location, education and project technology filters."""
    filters = SearchFilters.from_params(
        q=q, skills=skills, location=location, education=education, technologies=project_tech
    )
    data = service.advanced_search(db, filters, paging, viewer_id=viewer.id if viewer else None)
    return {"success": True, "data": data}


@router.get("/trending-skills")
def trending_skills(
    limit: int = Depends(result_limit(TOP_N_DEFAULT)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.trending_skills(db, limit)}
