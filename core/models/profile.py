"""
Profile aggregate SQLAlchemy models.

A Profile owns its skills, projects (with their technology tags) and work
experience. The child rows are never shared between profiles and are only
changed through the owning Profile.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import SOCIAL_LINK_KEYS

from .base import Base, utcnow

if TYPE_CHECKING:
    from .user import User


def empty_links() -> dict[str, str]:
    """Fixed-shape social links record with every key present."""
    return {key: "" for key in SOCIAL_LINK_KEYS}


class ProfileSkill(Base):
    """A single skill string on a profile, ordered by insertion."""

    __tablename__ = "profile_skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(50), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="skill_entries")


class ProjectTechnology(Base):
    """A technology tag on a project, ordered by insertion."""

    __tablename__ = "project_technologies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(50), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    project: Mapped["Project"] = relationship("Project", back_populates="technology_entries")


class Project(Base):
    """
    Portfolio project embedded in a profile.

    Attributes:
        links: http(s) URLs for the project (repository, demo, ...)
        technologies: Technology tags, in the order they were given
        is_public: Own visibility flag; the parent profile must be public too
    """

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(Text)
    links: Mapped[list[str]] = mapped_column(JSON, default=list)
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    profile: Mapped["Profile"] = relationship("Profile", back_populates="projects")
    technology_entries: Mapped[list[ProjectTechnology]] = relationship(
        "ProjectTechnology",
        back_populates="project",
        order_by="ProjectTechnology.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    technologies: AssociationProxy[list[str]] = association_proxy(
        "technology_entries", "name", creator=lambda name: ProjectTechnology(name=name)
    )


class WorkExperience(Base):
    """Work history entry embedded in a profile. Visible whenever the profile is."""

    __tablename__ = "work_experience"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    company: Mapped[str] = mapped_column(String(100))
    position: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(500))
    start_date: Mapped[str] = mapped_column(String(10))
    end_date: Mapped[str] = mapped_column(String(10), default="")
    is_current: Mapped[bool] = mapped_column(Boolean, default=False)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="work")


class Profile(Base):
    """
    Public-facing portfolio of a user.

    Attributes:
        email: Copied from the user at registration; not re-synced afterwards
        skills: Ordered skill strings (exact duplicates are never added)
        links: Social links record (github, linkedin, portfolio, website)
        is_public: Private profiles are hidden from every public endpoint
        version: Optimistic concurrency counter, bumped on every write
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    email: Mapped[str] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(String(500), nullable=True)
    education: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    links: Mapped[dict[str, str]] = mapped_column(JSON, default=empty_links)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="profile")
    skill_entries: Mapped[list[ProfileSkill]] = relationship(
        "ProfileSkill",
        back_populates="profile",
        order_by="ProfileSkill.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    projects: Mapped[list[Project]] = relationship(
        "Project",
        back_populates="profile",
        order_by="Project.id",
        cascade="all, delete-orphan",
    )
    work: Mapped[list[WorkExperience]] = relationship(
        "WorkExperience",
        back_populates="profile",
        order_by="WorkExperience.id",
        cascade="all, delete-orphan",
    )

    skills: AssociationProxy[list[str]] = association_proxy(
        "skill_entries", "name", creator=lambda name: ProfileSkill(name=name)
    )

    @property
    def public_projects(self) -> list[Project]:
        """Projects visible to third parties (assumes the profile itself is public)."""
        return [project for project in self.projects if project.is_public]

    def add_skill(self, skill: str) -> bool:
        """Append a skill unless the exact string is already present."""
        if skill in self.skills:
            return False
        self.skills.append(skill)
        return True

    def remove_skill(self, skill: str) -> bool:
        """Remove every exact match of a skill."""
        removed = False
        while skill in self.skills:
            self.skills.remove(skill)
            removed = True
        return removed

    def get_project(self, project_id: int) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_work(self, work_id: int) -> WorkExperience | None:
        return next((w for w in self.work if w.id == work_id), None)
