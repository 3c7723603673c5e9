"""
Public project browsing endpoints.

Only projects that are public on public profiles are ever returned.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, TOP_N_DEFAULT
from core.search import PageRequest, service

from ..database import get_db
from ..dependencies import pagination, result_limit

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
def list_projects(
    skill: str | None = Query(default=None),
    search: str | None = Query(default=None),
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    """
    List public projects, newest first.

    ``skill`` takes comma-separated technologies (any may match); ``search``
    matches title or description.
    """
    return {"success": True, "data": service.list_projects(db, paging, skill=skill, search=search)}


@router.get("/trending")
def trending_projects(
    limit: int = Depends(result_limit(TOP_N_DEFAULT)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.trending_projects(db, limit)}


@router.get("/skill/{skill}")
def projects_by_skill(
    skill: str,
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.projects_by_technology(db, skill, paging)}


@router.get("/user/{user_id}")
def projects_by_user(
    user_id: int,
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.projects_by_user(db, user_id, paging)}


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    """A single public project with a summary of its owner."""
    return {"success": True, "data": service.get_public_project(db, project_id)}
