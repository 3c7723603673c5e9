"""
Public projections of profile data.

Every function here returns a response-safe dict with camelCase keys. Nothing
produced by this module carries a password hash, a profile email, or a project
that is not public.
"""

from core.constants import ADVANCED_SEARCH_PROJECTS_PER_PROFILE, ADVANCED_SEARCH_WORK_PER_PROFILE
from core.models import Profile, Project, WorkExperience, empty_links


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "links": list(project.links or []),
        "technologies": list(project.technologies),
        "imageUrl": project.image_url,
        "isPublic": project.is_public,
        "createdAt": project.created_at,
        "updatedAt": project.updated_at,
    }


def work_to_dict(entry: WorkExperience) -> dict:
    return {
        "id": entry.id,
        "company": entry.company,
        "position": entry.position,
        "description": entry.description,
        "startDate": entry.start_date,
        "endDate": entry.end_date or "",
        "isCurrent": entry.is_current,
        "location": entry.location,
        "createdAt": entry.created_at,
        "updatedAt": entry.updated_at,
    }


def links_to_dict(profile: Profile) -> dict:
    return {**empty_links(), **(profile.links or {})}


def profile_card(profile: Profile) -> dict:
    """Summary used by search results and skill pages."""
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "name": profile.name,
        "avatar": profile.avatar,
        "bio": profile.bio,
        "skills": list(profile.skills),
        "education": profile.education,
        "location": profile.location,
    }


def project_owner(profile: Profile) -> dict:
    """Owner summary attached to project listings."""
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "name": profile.name,
        "avatar": profile.avatar,
        "skills": list(profile.skills),
    }


def owner_detail(profile: Profile) -> dict:
    return {**project_owner(profile), "bio": profile.bio}


def public_project_with_owner(project: Project) -> dict:
    return {**project_to_dict(project), "profile": project_owner(project.profile)}


def advanced_result(profile: Profile) -> dict:
    """Profile card with its first few public projects and work entries."""
    projects = profile.public_projects[:ADVANCED_SEARCH_PROJECTS_PER_PROFILE]
    work = profile.work[:ADVANCED_SEARCH_WORK_PER_PROFILE]
    return {
        **profile_card(profile),
        "projects": [project_to_dict(p) for p in projects],
        "work": [work_to_dict(w) for w in work],
    }


def public_profile(profile: Profile) -> dict:
    """Full public view of a profile. Assumes the caller checked ``is_public``."""
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "name": profile.name,
        "bio": profile.bio,
        "education": profile.education,
        "skills": list(profile.skills),
        "projects": [project_to_dict(p) for p in profile.public_projects],
        "work": [work_to_dict(w) for w in profile.work],
        "links": links_to_dict(profile),
        "avatar": profile.avatar,
        "location": profile.location,
        "createdAt": profile.created_at,
        "updatedAt": profile.updated_at,
    }


def owner_profile(profile: Profile) -> dict:
    """Everything the owner may see about their own profile, private rows included."""
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "name": profile.name,
        "email": profile.email,
        "bio": profile.bio,
        "education": profile.education,
        "location": profile.location,
        "avatar": profile.avatar,
        "isPublic": profile.is_public,
        "skills": list(profile.skills),
        "projects": [project_to_dict(p) for p in profile.projects],
        "work": [work_to_dict(w) for w in profile.work],
        "links": links_to_dict(profile),
        "version": profile.version,
        "createdAt": profile.created_at,
        "updatedAt": profile.updated_at,
    }


__all__ = [
    "project_to_dict",
    "work_to_dict",
    "links_to_dict",
    "profile_card",
    "project_owner",
    "owner_detail",
    "public_project_with_owner",
    "advanced_result",
    "public_profile",
    "owner_profile",
]
