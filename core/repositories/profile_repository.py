"""
Profile aggregate repository.

Every write follows the same shape: load the profile, apply one change to it
or one of its child rows, stamp ``updated_at``. Stamping the profile row makes
SQLAlchemy bump ``profiles.version`` on flush, so a concurrent writer that
committed first turns this write into a StaleDataError instead of a lost update.
The caller owns the transaction and commits.
"""

from typing import Any

from sqlalchemy.orm import selectinload

from core.logging import get_logger
from core.models import Profile, Project, User, WorkExperience, empty_links
from core.models.base import utcnow

from .base import BaseRepository

logger = get_logger("repository.profile")

PROFILE_FIELDS = ("name", "email", "bio", "education", "location", "avatar", "is_public")
PROJECT_FIELDS = ("title", "description", "links", "technologies", "image_url", "is_public")
WORK_FIELDS = (
    "company",
    "position",
    "description",
    "start_date",
    "end_date",
    "is_current",
    "location",
)


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile aggregate operations."""

    model = Profile

    def _query(self):
        return self.session.query(Profile).options(
            selectinload(Profile.skill_entries),
            selectinload(Profile.projects).selectinload(Project.technology_entries),
            selectinload(Profile.work),
        )

    def get_by_user_id(self, user_id: int) -> Profile | None:
        """Get profile by user ID, with all child rows loaded."""
        return self._query().filter(Profile.user_id == user_id).first()

    def get_public_by_user_id(self, user_id: int) -> Profile | None:
        """Get a profile only if it is public. Private and missing look the same."""
        return (
            self._query()
            .filter(Profile.user_id == user_id, Profile.is_public.is_(True))
            .first()
        )

    def has_profile(self, user_id: int) -> bool:
        """Check if a user has a profile (efficient exists query)."""
        return self.exists_where(user_id=user_id)

    def _touch(self, profile: Profile) -> None:
        profile.updated_at = utcnow()
        self.session.flush()

    # ------------------------------------------------------------------
    # Profile fields
    # ------------------------------------------------------------------

    def create_for_user(self, user: User, name: str, **fields: Any) -> Profile:
        """
        Create the profile owned by ``user``.

        The email is copied from the user once; later profile updates may change
        it independently.
        """
        profile = Profile(
            user_id=user.id,
            name=name,
            email=(fields.pop("email", None) or user.email).lower(),
            links=empty_links(),
        )
        self._apply_fields(profile, fields)
        self.add(profile)
        logger.info("profile_created", user_id=user.id, profile_id=profile.id)
        return profile

    def update_fields(self, profile: Profile, **fields: Any) -> Profile:
        """Update only the scalar profile fields that were provided."""
        self._apply_fields(profile, fields)
        self._touch(profile)
        return profile

    @staticmethod
    def _apply_fields(profile: Profile, fields: dict[str, Any]) -> None:
        for key, value in fields.items():
            if key not in PROFILE_FIELDS:
                continue
            if key == "email" and value is not None:
                value = value.lower()
            setattr(profile, key, value)

    def update_links(self, profile: Profile, links: dict[str, str]) -> dict[str, str]:
        """Merge the given social links over the stored ones."""
        merged = {**empty_links(), **(profile.links or {}), **links}
        profile.links = merged
        self._touch(profile)
        return merged

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    def add_skill(self, profile: Profile, skill: str) -> bool:
        """Append a skill. Returns False when the exact string is already present."""
        added = profile.add_skill(skill)
        if added:
            self._touch(profile)
            logger.info("skill_added", profile_id=profile.id, skill=skill)
        return added

    def remove_skill(self, profile: Profile, skill: str) -> bool:
        removed = profile.remove_skill(skill)
        if removed:
            self._touch(profile)
            logger.info("skill_removed", profile_id=profile.id, skill=skill)
        return removed

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def add_project(self, profile: Profile, **data: Any) -> Project:
        project = Project(
            title=data["title"],
            description=data["description"],
            links=list(data.get("links") or []),
            image_url=data.get("image_url") or None,
            is_public=data.get("is_public", True),
        )
        project.technologies.extend(data.get("technologies") or [])
        profile.projects.append(project)
        self._touch(profile)
        logger.info("project_added", profile_id=profile.id, project_id=project.id)
        return project

    def update_project(self, profile: Profile, project_id: int, **data: Any) -> Project | None:
        """Merge the given fields into one of the profile's projects. None if it is not there."""
        project = profile.get_project(project_id)
        if project is None:
            return None

        for key, value in data.items():
            if key not in PROJECT_FIELDS:
                continue
            if key == "technologies":
                project.technology_entries.clear()
                project.technologies.extend(value or [])
            elif key == "links":
                project.links = list(value or [])
            elif key == "image_url":
                project.image_url = value or None
            else:
                setattr(project, key, value)

        project.updated_at = utcnow()
        self._touch(profile)
        logger.info("project_updated", profile_id=profile.id, project_id=project_id)
        return project

    def remove_project(self, profile: Profile, project_id: int) -> bool:
        """Remove a project. Removing one that does not exist is a no-op."""
        project = profile.get_project(project_id)
        if project is None:
            return False
        profile.projects.remove(project)
        self._touch(profile)
        logger.info("project_removed", profile_id=profile.id, project_id=project_id)
        return True

    # ------------------------------------------------------------------
    # Work experience
    # ------------------------------------------------------------------

    def add_work(self, profile: Profile, **data: Any) -> WorkExperience:
        entry = WorkExperience(
            company=data["company"],
            position=data["position"],
            description=data["description"],
            start_date=data["start_date"],
            end_date=data.get("end_date") or "",
            is_current=data.get("is_current", False),
            location=data.get("location") or None,
        )
        profile.work.append(entry)
        self._touch(profile)
        logger.info("work_added", profile_id=profile.id, work_id=entry.id)
        return entry

    def update_work(self, profile: Profile, work_id: int, **data: Any) -> WorkExperience | None:
        entry = profile.get_work(work_id)
        if entry is None:
            return None

        for key, value in data.items():
            if key not in WORK_FIELDS:
                continue
            if key == "end_date":
                value = value or ""
            elif key == "location":
                value = value or None
            setattr(entry, key, value)

        entry.updated_at = utcnow()
        self._touch(profile)
        logger.info("work_updated", profile_id=profile.id, work_id=work_id)
        return entry

    def remove_work(self, profile: Profile, work_id: int) -> bool:
        """Remove a work entry. Removing one that does not exist is a no-op."""
        entry = profile.get_work(work_id)
        if entry is None:
            return False
        profile.work.remove(entry)
        self._touch(profile)
        logger.info("work_removed", profile_id=profile.id, work_id=work_id)
        return True
