"""
Translate search requests into SQLAlchemy filter clauses.

All text matching is case-insensitive substring (or prefix) matching with LIKE
wildcards in user input escaped, so a query like ``50%`` or ``c_sharp`` is
matched literally. Collection filters (skills, technologies) use EXISTS over
the child rows: an entity matches when ANY requested term is contained in ANY
of its entries.
"""

from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, and_, or_, true

from core.models import Profile, ProfileSkill, Project, ProjectTechnology


def split_terms(raw: str | None) -> list[str]:
    """Split a comma separated filter value, trimming and dropping empty items."""
    if not raw:
        return []
    return [term.strip() for term in raw.split(",") if term.strip()]


def clean_text(raw: str | None) -> str | None:
    """Trim a free-text value; blank becomes None."""
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def contains(column, text: str) -> ColumnElement[bool]:
    return column.icontains(text, autoescape=True)


def starts_with(column, text: str) -> ColumnElement[bool]:
    return column.istartswith(text, autoescape=True)


def any_contains(column, terms: list[str]) -> ColumnElement[bool]:
    return or_(*[contains(column, term) for term in terms])


@dataclass
class SearchFilters:
    """
    Structured search request.

    Attributes:
        query: Free text, ORed across the fields of the entity searched
        skills: Profile skill terms (ANY term in ANY skill)
        location: Substring of the profile location
        education: Substring of the profile education
        technologies: Project technology terms (ANY term in ANY tag)
    """

    query: str | None = None
    skills: list[str] = field(default_factory=list)
    location: str | None = None
    education: str | None = None
    technologies: list[str] = field(default_factory=list)

    @classmethod
    def from_params(
        cls,
        q: str | None = None,
        skills: str | None = None,
        location: str | None = None,
        education: str | None = None,
        technologies: str | None = None,
    ) -> "SearchFilters":
        return cls(
            query=clean_text(q),
            skills=split_terms(skills),
            location=clean_text(location),
            education=clean_text(education),
            technologies=split_terms(technologies),
        )


# =============================================================================
# Visibility
# =============================================================================


def public_profile() -> ColumnElement[bool]:
    return Profile.is_public.is_(True)


def public_project() -> ColumnElement[bool]:
    """Project visible to third parties. Callers must join Profile."""
    return and_(Project.is_public.is_(True), Profile.is_public.is_(True))


# =============================================================================
# Profiles
# =============================================================================


def profile_text_clause(query: str) -> ColumnElement[bool]:
    """Free text over name, bio, education and location."""
    return or_(
        contains(Profile.name, query),
        contains(Profile.bio, query),
        contains(Profile.education, query),
        contains(Profile.location, query),
    )


def profile_skills_clause(terms: list[str]) -> ColumnElement[bool]:
    return Profile.skill_entries.any(any_contains(ProfileSkill.name, terms))


def profile_search_clause(query: str) -> ColumnElement[bool]:
    """Public profiles matching the unified search text."""
    return and_(public_profile(), profile_text_clause(query))


def advanced_profile_clause(filters: SearchFilters) -> ColumnElement[bool]:
    """
    AND of every provided filter, always restricted to public profiles.

    Free text covers name, bio and the title or description of the profile's
    public projects. Technology terms only look at public projects, so a
    private project never makes its owner show up in results.
    """
    clauses: list[ColumnElement[bool]] = [public_profile()]

    if filters.query:
        clauses.append(
            or_(
                contains(Profile.name, filters.query),
                contains(Profile.bio, filters.query),
                Profile.projects.any(
                    and_(
                        Project.is_public.is_(True),
                        or_(
                            contains(Project.title, filters.query),
                            contains(Project.description, filters.query),
                        ),
                    )
                ),
            )
        )
    if filters.skills:
        clauses.append(profile_skills_clause(filters.skills))
    if filters.location:
        clauses.append(contains(Profile.location, filters.location))
    if filters.education:
        clauses.append(contains(Profile.education, filters.education))
    if filters.technologies:
        clauses.append(
            Profile.projects.any(
                and_(Project.is_public.is_(True), project_technologies_clause(filters.technologies))
            )
        )

    return and_(*clauses)


# =============================================================================
# Projects
# =============================================================================


def project_technologies_clause(terms: list[str]) -> ColumnElement[bool]:
    return Project.technology_entries.any(any_contains(ProjectTechnology.name, terms))


def project_text_clause(query: str, include_technologies: bool = True) -> ColumnElement[bool]:
    """Free text over title and description, and optionally technology tags."""
    options = [contains(Project.title, query), contains(Project.description, query)]
    if include_technologies:
        options.append(project_technologies_clause([query]))
    return or_(*options)


def project_search_clause(query: str) -> ColumnElement[bool]:
    """Public projects (on public profiles) matching the unified search text."""
    return and_(public_project(), project_text_clause(query))


def project_listing_clause(
    technologies: list[str] | None = None, search: str | None = None
) -> ColumnElement[bool]:
    """Filters for the public project browser."""
    clauses: list[ColumnElement[bool]] = [public_project()]
    if technologies:
        clauses.append(project_technologies_clause(technologies))
    if search:
        clauses.append(project_text_clause(search, include_technologies=False))
    return and_(*clauses)


# =============================================================================
# Skills
# =============================================================================


def skill_name_clause(query: str | None) -> ColumnElement[bool]:
    """Skill rows whose name contains ``query``. No query matches everything."""
    if not query:
        return true()
    return contains(ProfileSkill.name, query)


def skill_prefix_clause(prefix: str) -> ColumnElement[bool]:
    return starts_with(ProfileSkill.name, prefix)


def skill_keywords_clause(keywords: list[str]) -> ColumnElement[bool]:
    return any_contains(ProfileSkill.name, keywords)
