"""
Public search and browsing operations.

Each function takes a session and validated parameters and returns the
``data`` payload of the matching endpoint. Routers only wrap the result in the
response envelope.
"""

from sqlalchemy.orm import Query, Session, selectinload

from core.constants import SEARCH_TYPES, SKILL_DETAIL_PROJECT_LIMIT
from core.errors import BadRequestError, NotFoundError
from core.logging import get_logger
from core.models import Profile, Project

from . import aggregator, shaper
from .pagination import PageRequest, build_page, paginate_query
from .query_builder import (
    SearchFilters,
    advanced_profile_clause,
    clean_text,
    profile_search_clause,
    profile_skills_clause,
    project_listing_clause,
    project_search_clause,
    public_profile,
    public_project,
    split_terms,
)

logger = get_logger("search")


def _profiles(session: Session) -> Query:
    return session.query(Profile).options(selectinload(Profile.skill_entries))


def _projects(session: Session) -> Query:
    """Projects joined to their owner, newest first."""
    return (
        session.query(Project)
        .join(Profile, Project.profile_id == Profile.id)
        .options(
            selectinload(Project.technology_entries),
            selectinload(Project.profile).selectinload(Profile.skill_entries),
        )
        .order_by(Project.created_at.desc(), Project.id.desc())
    )


# =============================================================================
# /api/search
# =============================================================================


def search_profiles(session: Session, query: str, request: PageRequest) -> dict:
    profiles, total = paginate_query(
        _profiles(session)
        .filter(profile_search_clause(query))
        .order_by(Profile.name.asc(), Profile.id.asc()),
        request,
    )
    return build_page([shaper.profile_card(p) for p in profiles], total, request).to_dict()


def search_projects(session: Session, query: str, request: PageRequest) -> dict:
    projects, total = paginate_query(
        _projects(session).filter(project_search_clause(query)), request
    )
    return build_page(
        [shaper.public_project_with_owner(p) for p in projects], total, request
    ).to_dict()


def search_skills(session: Session, query: str, request: PageRequest) -> dict:
    skills, total = aggregator.skill_histogram(session, request, query=query)
    return build_page([s.to_dict() for s in skills], total, request).to_dict()


def unified_search(
    session: Session,
    q: str | None,
    search_type: str | None,
    request: PageRequest,
    viewer_id: int | None = None,
) -> dict:
    """
    Search profiles, projects and skills at once.

    Each result type is paginated on its own with the same page and limit.
    """
    query = clean_text(q)
    if query is None:
        raise BadRequestError("Search query is required")

    search_type = (search_type or "all").lower()
    if search_type not in SEARCH_TYPES:
        raise BadRequestError(f"Search type must be one of: {', '.join(SEARCH_TYPES)}")

    results: dict[str, dict] = {}
    if search_type in ("all", "profiles"):
        results["profiles"] = search_profiles(session, query, request)
    if search_type in ("all", "projects"):
        results["projects"] = search_projects(session, query, request)
    if search_type in ("all", "skills"):
        results["skills"] = search_skills(session, query, request)

    total_results = sum(result["total"] for result in results.values())
    logger.info(
        "search_executed", type=search_type, total_results=total_results, viewer_id=viewer_id
    )

    return {
        "query": query,
        "type": search_type,
        "totalResults": total_results,
        "results": results,
        "pagination": {"currentPage": request.page, "limit": request.limit},
    }


def search_suggestions(session: Session, q: str | None, limit: int) -> dict:
    """Prefix suggestions. An empty query yields no suggestions rather than an error."""
    prefix = clean_text(q)
    if prefix is None:
        return {"query": "", "suggestions": []}
    return {"query": prefix, "suggestions": aggregator.suggestions(session, prefix, limit)}


def advanced_search(
    session: Session, filters: SearchFilters, request: PageRequest, viewer_id: int | None = None
) -> dict:
    profiles, total = paginate_query(
        session.query(Profile)
        .options(
            selectinload(Profile.skill_entries),
            selectinload(Profile.projects).selectinload(Project.technology_entries),
            selectinload(Profile.work),
        )
        .filter(advanced_profile_clause(filters))
        .order_by(Profile.name.asc(), Profile.id.asc()),
        request,
    )
    logger.info("advanced_search_executed", total=total, viewer_id=viewer_id)
    return {
        "query": {
            "text": filters.query or "",
            "skills": filters.skills,
            "location": filters.location or "",
            "education": filters.education or "",
            "projectTech": filters.technologies,
        },
        "profiles": build_page([shaper.advanced_result(p) for p in profiles], total, request).to_dict(),
    }


def trending_skills(session: Session, limit: int) -> dict:
    return {"skills": [s.to_dict() for s in aggregator.top_skills(session, limit)]}


# =============================================================================
# /api/skills
# =============================================================================


def list_skills(session: Session, request: PageRequest) -> dict:
    skills, total = aggregator.skill_histogram(session, request)
    return build_page([s.to_dict() for s in skills], total, request).to_dict()


def ranked_skills(session: Session, limit: int) -> dict:
    skills = aggregator.ranked(aggregator.top_skills(session, limit))
    return {"skills": skills, "total": len(skills)}


def skill_categories(session: Session) -> dict:
    return {"categories": aggregator.skill_categories(session)}


def find_skills(session: Session, query: str, limit: int) -> dict:
    """Skills whose text contains ``query``, most common first."""
    text = clean_text(query)
    if text is None:
        raise BadRequestError("Search query is required")
    skills = [s.to_dict() for s in aggregator.top_skills(session, limit, query=text)]
    return {"query": text, "skills": skills, "total": len(skills)}


def skill_detail(session: Session, skill: str, request: PageRequest) -> dict:
    """Profiles having ``skill``, projects built with it, and other popular skills."""
    name = clean_text(skill)
    if name is None:
        raise BadRequestError("Skill name is required")

    profiles, total_profiles = paginate_query(
        _profiles(session)
        .filter(public_profile(), profile_skills_clause([name]))
        .order_by(Profile.name.asc(), Profile.id.asc()),
        request,
    )
    if total_profiles == 0:
        raise NotFoundError("No profiles found with this skill")

    project_query = _projects(session).filter(project_listing_clause(technologies=[name]))
    total_projects = project_query.order_by(None).count()
    projects = project_query.limit(SKILL_DETAIL_PROJECT_LIMIT).all()

    return {
        "skill": {"name": name, "totalProfiles": total_profiles, "totalProjects": total_projects},
        "profiles": build_page([shaper.profile_card(p) for p in profiles], total_profiles, request).to_dict(),
        "projects": [shaper.public_project_with_owner(p) for p in projects],
        "relatedSkills": aggregator.related_skills(session, name),
    }


# =============================================================================
# /api/projects
# =============================================================================


def list_projects(
    session: Session, request: PageRequest, skill: str | None = None, search: str | None = None
) -> dict:
    """Public projects, optionally narrowed by technology terms and title/description text."""
    projects, total = paginate_query(
        _projects(session).filter(
            project_listing_clause(technologies=split_terms(skill), search=clean_text(search))
        ),
        request,
    )
    return build_page(
        [shaper.public_project_with_owner(p) for p in projects], total, request
    ).to_dict()


def projects_by_technology(session: Session, skill: str, request: PageRequest) -> dict:
    name = clean_text(skill)
    if name is None:
        raise BadRequestError("Skill name is required")
    projects, total = paginate_query(
        _projects(session).filter(project_listing_clause(technologies=[name])), request
    )
    return {
        "skill": name,
        "projects": build_page(
            [shaper.public_project_with_owner(p) for p in projects], total, request
        ).to_dict(),
    }


def projects_by_user(session: Session, user_id: int, request: PageRequest) -> dict:
    profile = _profiles(session).filter(Profile.user_id == user_id, public_profile()).first()
    if profile is None:
        raise NotFoundError("User profile not found or not public")

    projects, total = paginate_query(
        session.query(Project)
        .join(Profile, Project.profile_id == Profile.id)
        .options(selectinload(Project.technology_entries))
        .filter(Project.profile_id == profile.id, public_project())
        .order_by(Project.id.asc()),
        request,
    )
    return {
        "profile": shaper.owner_detail(profile),
        "projects": build_page([shaper.project_to_dict(p) for p in projects], total, request).to_dict(),
    }


def get_public_project(session: Session, project_id: int) -> dict:
    project = (
        _projects(session).filter(Project.id == project_id, public_project()).first()
    )
    if project is None:
        raise NotFoundError("Project not found or not public")
    return {"project": shaper.project_to_dict(project), "profile": shaper.owner_detail(project.profile)}


def trending_projects(session: Session, limit: int) -> dict:
    projects = aggregator.trending_projects(session, limit)
    return {"projects": [shaper.public_project_with_owner(p) for p in projects]}


__all__ = [
    "search_profiles",
    "search_projects",
    "search_skills",
    "unified_search",
    "search_suggestions",
    "advanced_search",
    "trending_skills",
    "list_skills",
    "ranked_skills",
    "skill_categories",
    "find_skills",
    "skill_detail",
    "list_projects",
    "projects_by_technology",
    "projects_by_user",
    "get_public_project",
    "trending_projects",
]
