"""
Profile management endpoints.

All writes go through ProfileRepository on the caller's own profile and are
committed here, one mutation per request. Reads of other users' profiles only
ever see the public projection.
"""

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from core.config import Settings
from core.errors import BadRequestError, NotFoundError
from core.logging import get_logger
from core.models import Profile, User
from core.repositories import ProfileRepository
from core.search import shaper

from ..auth.dependencies import get_current_user
from ..database import get_app_settings, get_db
from ..dependencies import get_own_profile, get_profile_repository
from ..schemas import LinksRequest, ProfileUpdateRequest, ProjectRequest, SkillRequest, WorkRequest
from ..services import profile_service

logger = get_logger("profile")

router = APIRouter(prefix="/profile", tags=["profile"])


def _projects(profile: Profile) -> list[dict]:
    return [shaper.project_to_dict(p) for p in profile.projects]


def _work(profile: Profile) -> list[dict]:
    return [shaper.work_to_dict(w) for w in profile.work]


# =============================================================================
# Profile
# =============================================================================


@router.get("")
def get_profile(profile: Profile = Depends(get_own_profile)):
    """Get the caller's full profile, private projects included."""
    return {"success": True, "data": shaper.owner_profile(profile)}


@router.post("")
def create_or_update_profile(
    payload: ProfileUpdateRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """
    Create the caller's profile, or update it if one already exists.

    Returns 201 when a profile was created.
    """
    fields = payload.model_dump(exclude_unset=True)
    profile = profile_repo.get_by_user_id(current_user.id)

    if profile is not None:
        profile_repo.update_fields(profile, **fields)
        db.commit()
        return {"success": True, "message": "Profile updated successfully", "data": shaper.owner_profile(profile)}

    name = fields.pop("name", None)
    if not name:
        raise BadRequestError("Name is required")
    profile = profile_repo.create_for_user(current_user, name=name, **fields)
    db.commit()

    response.status_code = status.HTTP_201_CREATED
    return {"success": True, "message": "Profile created successfully", "data": shaper.owner_profile(profile)}


@router.put("")
def update_profile(
    payload: ProfileUpdateRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """Update only the profile fields present in the body."""
    profile_repo.update_fields(profile, **payload.model_dump(exclude_unset=True))
    db.commit()
    logger.info("profile_updated", profile_id=profile.id)
    return {"success": True, "message": "Profile updated successfully", "data": shaper.owner_profile(profile)}


# =============================================================================
# Skills
# =============================================================================


@router.post("/skills")
def add_skill(
    payload: SkillRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """Append a skill. An exact duplicate leaves the list unchanged."""
    profile_repo.add_skill(profile, payload.skill)
    db.commit()
    return {"success": True, "message": "Skill added successfully", "data": list(profile.skills)}


@router.delete("/skills/{skill}")
def remove_skill(
    skill: str,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    profile_repo.remove_skill(profile, skill)
    db.commit()
    return {"success": True, "message": "Skill removed successfully", "data": list(profile.skills)}


# =============================================================================
# Projects
# =============================================================================


@router.post("/projects")
def add_project(
    payload: ProjectRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    profile_repo.add_project(profile, **payload.model_dump())
    db.commit()
    return {"success": True, "message": "Project added successfully", "data": _projects(profile)}


@router.post("/projects/upload")
def add_project_with_image(
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    technologies: list[str] = Form(default=[]),
    links: list[str] = Form(default=[]),
    is_public: bool = Form(default=True, alias="isPublic"),
    image: UploadFile | None = File(default=None),
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Add a project from a multipart form, with an optional ``image`` file.

    The image is stored under UPLOAD_DIR/projects and served from /uploads.
    If anything fails after the file was written, the file is removed before
    the error propagates.
    """
    upload = None
    try:
        if image is not None and image.filename:
            upload = profile_service.store_project_image(image, settings)

        data = ProjectRequest.model_validate(
            {
                "title": title,
                "description": description,
                "technologies": [t for t in technologies if t.strip()],
                "links": [link for link in links if link.strip()],
                "image_url": upload.url if upload else None,
                "is_public": is_public,
            }
        )
        profile_repo.add_project(profile, **data.model_dump())
        db.commit()
    except Exception:
        profile_service.remove_upload(upload)
        raise

    message = "Project added successfully with image" if upload else "Project added successfully"
    return {"success": True, "message": message, "data": _projects(profile)}


@router.put("/projects/{project_id}")
def update_project(
    project_id: int,
    payload: ProjectRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """Replace a project's fields. Keys left out of the body keep their values."""
    project = profile_repo.update_project(profile, project_id, **payload.model_dump(exclude_unset=True))
    if project is None:
        raise NotFoundError("Project not found")
    db.commit()
    return {"success": True, "message": "Project updated successfully", "data": _projects(profile)}


@router.delete("/projects/{project_id}")
def remove_project(
    project_id: int,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    profile_repo.remove_project(profile, project_id)
    db.commit()
    return {"success": True, "message": "Project removed successfully", "data": _projects(profile)}


# =============================================================================
# Work experience
# =============================================================================


@router.post("/work")
def add_work(
    payload: WorkRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    profile_repo.add_work(profile, **payload.model_dump())
    db.commit()
    return {"success": True, "message": "Work experience added successfully", "data": _work(profile)}


@router.put("/work/{work_id}")
def update_work(
    work_id: int,
    payload: WorkRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    entry = profile_repo.update_work(profile, work_id, **payload.model_dump(exclude_unset=True))
    if entry is None:
        raise NotFoundError("Work experience not found")
    db.commit()
    return {"success": True, "message": "Work experience updated successfully", "data": _work(profile)}


@router.delete("/work/{work_id}")
def remove_work(
    work_id: int,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    profile_repo.remove_work(profile, work_id)
    db.commit()
    return {"success": True, "message": "Work experience removed successfully", "data": _work(profile)}


# =============================================================================
# Links
# =============================================================================


@router.put("/links")
def update_links(
    payload: LinksRequest,
    profile: Profile = Depends(get_own_profile),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """Merge social links. Links left out of the body are kept; an empty string clears one."""
    links = profile_repo.update_links(profile, payload.model_dump(exclude_unset=True))
    db.commit()
    return {"success": True, "message": "Links updated successfully", "data": links}


# =============================================================================
# Public view
# =============================================================================


@router.get("/{user_id}")
def get_public_profile(
    user_id: int,
    profile_repo: ProfileRepository = Depends(get_profile_repository),
):
    """Public view of another user's profile. Private profiles are reported as missing."""
    profile = profile_repo.get_public_by_user_id(user_id)
    if profile is None:
        raise NotFoundError("Profile not found or not public")
    return {"success": True, "data": shaper.public_profile(profile)}
