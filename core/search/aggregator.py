"""
Skill and project aggregations over public profiles.

The skill histogram groups skill rows by their lowercased text. Each bucket is
displayed with the first spelling ever stored (lowest row id) and buckets are
ordered by occurrence count descending, then display name ascending, so page
boundaries stay stable between requests.
"""

from dataclasses import dataclass

from sqlalchemy import distinct, func
from sqlalchemy.orm import Query, Session, aliased, selectinload

from core.constants import (
    CATEGORY_TOP_N,
    RELATED_SKILLS_LIMIT,
    RELATED_SKILLS_POOL,
    SKILL_CATEGORIES,
    SUGGESTIONS_PER_SOURCE,
)
from core.logging import log_timing
from core.models import Profile, ProfileSkill, Project

from .pagination import PageRequest, paginate_query
from .query_builder import (
    public_profile,
    public_project,
    skill_keywords_clause,
    skill_name_clause,
    skill_prefix_clause,
    starts_with,
)


@dataclass
class SkillCount:
    """One histogram bucket."""

    key: str
    name: str
    count: int
    profile_count: int

    def to_dict(self, rank: int | None = None) -> dict:
        data = {"name": self.name, "count": self.count, "profileCount": self.profile_count}
        if rank is not None:
            return {"rank": rank, **data}
        return data


def histogram_query(session: Session, *clauses) -> Query:
    """
    Ordered histogram of public skills, optionally narrowed by skill row clauses.

    Rows are ``(key, name, count, profile_count)``.
    """
    lowered = func.lower(ProfileSkill.name)
    grouped = (
        session.query(
            lowered.label("key"),
            func.count(ProfileSkill.id).label("count"),
            func.count(distinct(ProfileSkill.profile_id)).label("profile_count"),
            func.min(ProfileSkill.id).label("first_id"),
        )
        .join(Profile, ProfileSkill.profile_id == Profile.id)
        .filter(public_profile(), *clauses)
        .group_by(lowered)
        .subquery()
    )
    first = aliased(ProfileSkill)
    return (
        session.query(grouped.c.key, first.name, grouped.c.count, grouped.c.profile_count)
        .select_from(grouped)
        .join(first, first.id == grouped.c.first_id)
        .order_by(grouped.c.count.desc(), first.name.asc())
    )


def _to_counts(rows) -> list[SkillCount]:
    return [
        SkillCount(key=key, name=name, count=count, profile_count=profile_count)
        for key, name, count, profile_count in rows
    ]


@log_timing("skill_histogram")
def skill_histogram(
    session: Session, request: PageRequest, query: str | None = None
) -> tuple[list[SkillCount], int]:
    """One page of the histogram plus the number of distinct skills."""
    rows, total = paginate_query(histogram_query(session, skill_name_clause(query)), request)
    return _to_counts(rows), total


def top_skills(session: Session, limit: int, query: str | None = None) -> list[SkillCount]:
    """The ``limit`` most common skills, optionally only those containing ``query``."""
    rows = histogram_query(session, skill_name_clause(query)).limit(limit).all()
    return _to_counts(rows)


def ranked(skills: list[SkillCount]) -> list[dict]:
    """Attach a 1-based rank to an already ordered list."""
    return [skill.to_dict(rank=index) for index, skill in enumerate(skills, start=1)]


@log_timing("skill_categories")
def skill_categories(session: Session) -> dict[str, list[dict]]:
    """Top skills per category of the static keyword table."""
    categories: dict[str, list[dict]] = {}
    for category, keywords in SKILL_CATEGORIES.items():
        rows = histogram_query(session, skill_keywords_clause(keywords)).limit(CATEGORY_TOP_N)
        categories[category] = [skill.to_dict() for skill in _to_counts(rows.all())]
    return categories


def related_skills(session: Session, skill: str) -> list[dict]:
    """
    Popular skills other than ``skill``.

    Taken from the global top skills, not from profiles that share ``skill``.
    """
    target = skill.strip().lower()
    pool = top_skills(session, RELATED_SKILLS_POOL)
    related = [entry for entry in pool if entry.key != target]
    return [entry.to_dict() for entry in related[:RELATED_SKILLS_LIMIT]]


def suggestions(session: Session, prefix: str, limit: int) -> list[dict]:
    """
    Prefix suggestions from profile names, skills and project titles.

    Each source contributes a handful of matches; the combined list is
    de-duplicated by value (first occurrence wins) and cut to ``limit``.
    """
    collected: list[dict] = []

    names = (
        session.query(Profile.name)
        .filter(public_profile(), starts_with(Profile.name, prefix))
        .order_by(Profile.name.asc(), Profile.id.asc())
        .limit(SUGGESTIONS_PER_SOURCE)
        .all()
    )
    collected.extend({"type": "profile", "text": name, "value": name} for (name,) in names)

    skills = histogram_query(session, skill_prefix_clause(prefix)).limit(SUGGESTIONS_PER_SOURCE)
    collected.extend(
        {"type": "skill", "text": skill.name, "value": skill.name}
        for skill in _to_counts(skills.all())
    )

    titles = (
        session.query(Project.title)
        .join(Profile, Project.profile_id == Profile.id)
        .filter(public_project(), starts_with(Project.title, prefix))
        .group_by(Project.title)
        .order_by(Project.title.asc())
        .limit(SUGGESTIONS_PER_SOURCE)
        .all()
    )
    collected.extend({"type": "project", "text": title, "value": title} for (title,) in titles)

    unique: list[dict] = []
    seen: set[str] = set()
    for suggestion in collected:
        if suggestion["value"] in seen:
            continue
        seen.add(suggestion["value"])
        unique.append(suggestion)
    return unique[:limit]


def trending_projects(session: Session, limit: int) -> list[Project]:
    """Newest public projects on public profiles."""
    return (
        session.query(Project)
        .join(Profile, Project.profile_id == Profile.id)
        .filter(public_project())
        .options(
            selectinload(Project.technology_entries),
            selectinload(Project.profile).selectinload(Profile.skill_entries),
        )
        .order_by(Project.created_at.desc(), Project.id.desc())
        .limit(limit)
        .all()
    )


__all__ = [
    "SkillCount",
    "histogram_query",
    "skill_histogram",
    "top_skills",
    "ranked",
    "skill_categories",
    "related_skills",
    "suggestions",
    "trending_projects",
]
