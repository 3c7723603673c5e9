"""
Skill browsing endpoints built on the skill histogram.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, SKILLS_PAGE_SIZE, TOP_N_DEFAULT
from core.search import PageRequest, service

from ..database import get_db
from ..dependencies import pagination, result_limit

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("")
def list_skills(
    paging: PageRequest = Depends(pagination(SKILLS_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    """All skills on public profiles, most common first."""
    return {"success": True, "data": service.list_skills(db, paging)}


@router.get("/top")
def top_skills(
    limit: int = Depends(result_limit(TOP_N_DEFAULT)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.ranked_skills(db, limit)}


@router.get("/categories")
def skill_categories(db: Session = Depends(get_db)):
    return {"success": True, "data": service.skill_categories(db)}


@router.get("/search/{query}")
def search_skills(
    query: str,
    limit: int = Depends(result_limit(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": service.find_skills(db, query, limit)}


@router.get("/{skill_name}")
def skill_detail(
    skill_name: str,
    paging: PageRequest = Depends(pagination(DEFAULT_PAGE_SIZE)),
    db: Session = Depends(get_db),
):
    """Profiles with a skill, public projects using it, and related skills."""
    return {"success": True, "data": service.skill_detail(db, skill_name, paging)}
