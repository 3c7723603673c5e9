"""
Pydantic schemas for request validation.

Request bodies use camelCase keys. Every rule carries the exact message shown
to clients; a violated rule surfaces as a 400 with ``{field, message}``
entries (see error_handlers).
"""

import re
from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from core.constants import (
    BIO_MAX_LENGTH,
    COMPANY_MAX_LENGTH,
    EDUCATION_MAX_LENGTH,
    LOCATION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
    POSITION_MAX_LENGTH,
    PROJECT_DESCRIPTION_MAX_LENGTH,
    PROJECT_TITLE_MAX_LENGTH,
    SKILL_MAX_LENGTH,
    TECHNOLOGY_MAX_LENGTH,
    WORK_DESCRIPTION_MAX_LENGTH,
)

URL_PATTERN = re.compile(r"^https?://.+", re.IGNORECASE)
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# =============================================================================
# Rule helpers
# =============================================================================


def _fail(message: str):
    raise PydanticCustomError("invalid_field", message)


def required(message: str) -> BeforeValidator:
    """Reject a missing field with ``message``. Pair with ``validate_default=True``."""

    def check(value: Any) -> Any:
        if value is None:
            _fail(message)
        return value

    return BeforeValidator(check)


def length(
    min_length: int | None = None,
    max_length: int | None = None,
    too_short: str = "",
    too_long: str = "",
) -> AfterValidator:
    def check(value: str | None) -> str | None:
        if value is None:
            return value
        if min_length is not None and len(value) < min_length:
            _fail(too_short)
        if max_length is not None and len(value) > max_length:
            _fail(too_long)
        return value

    return AfterValidator(check)


def pattern(regex: re.Pattern, message: str, allow_empty: bool = False) -> AfterValidator:
    def check(value: str | None) -> str | None:
        if value is None or (allow_empty and value == ""):
            return value
        if not regex.match(value):
            _fail(message)
        return value

    return AfterValidator(check)


def _email(value: str | None) -> str | None:
    if value is None:
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        _fail("Please provide a valid email address")
    return value.lower()


def _each(check, message: str):
    def validate(values: list[str] | None) -> list[str] | None:
        if values is None:
            return values
        for value in values:
            if not check(value):
                _fail(message)
        return values

    return AfterValidator(validate)


Email = Annotated[str, AfterValidator(_email)]


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# Auth
# =============================================================================


class RegisterRequest(RequestModel):
    email: Annotated[Email, required("Email is required")] = Field(
        default=None, validate_default=True
    )
    password: Annotated[
        str,
        required("Password is required"),
        length(
            min_length=PASSWORD_MIN_LENGTH,
            too_short=f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
        ),
    ] = Field(default=None, validate_default=True)
    name: Annotated[
        str,
        required("Name is required"),
        length(
            NAME_MIN_LENGTH,
            NAME_MAX_LENGTH,
            too_short=f"Name must be at least {NAME_MIN_LENGTH} characters long",
            too_long=f"Name cannot exceed {NAME_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)


class LoginRequest(RequestModel):
    email: Annotated[Email, required("Email is required")] = Field(
        default=None, validate_default=True
    )
    password: Annotated[str, required("Password is required")] = Field(
        default=None, validate_default=True
    )


# =============================================================================
# Profile
# =============================================================================


class ProfileUpdateRequest(RequestModel):
    """Partial update: only the keys present in the body are applied."""

    name: Annotated[
        str,
        length(
            NAME_MIN_LENGTH,
            NAME_MAX_LENGTH,
            too_short=f"Name must be at least {NAME_MIN_LENGTH} characters long",
            too_long=f"Name cannot exceed {NAME_MAX_LENGTH} characters",
        ),
    ] = None
    email: Email = None
    bio: Annotated[
        str | None,
        length(max_length=BIO_MAX_LENGTH, too_long=f"Bio cannot exceed {BIO_MAX_LENGTH} characters"),
    ] = None
    education: Annotated[
        str | None,
        length(
            max_length=EDUCATION_MAX_LENGTH,
            too_long=f"Education cannot exceed {EDUCATION_MAX_LENGTH} characters",
        ),
    ] = None
    location: Annotated[
        str | None,
        length(
            max_length=LOCATION_MAX_LENGTH,
            too_long=f"Location cannot exceed {LOCATION_MAX_LENGTH} characters",
        ),
    ] = None
    avatar: Annotated[str | None, pattern(URL_PATTERN, "Avatar must be a valid URL", allow_empty=True)] = None
    is_public: bool = None


class SkillRequest(RequestModel):
    skill: Annotated[
        str,
        required("Skill name is required"),
        length(
            1,
            SKILL_MAX_LENGTH,
            too_short="Skill name cannot be empty",
            too_long=f"Skill name cannot exceed {SKILL_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)


class ProjectRequest(RequestModel):
    title: Annotated[
        str,
        required("Project title is required"),
        length(
            1,
            PROJECT_TITLE_MAX_LENGTH,
            too_short="Project title cannot be empty",
            too_long=f"Project title cannot exceed {PROJECT_TITLE_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)
    description: Annotated[
        str,
        required("Project description is required"),
        length(
            1,
            PROJECT_DESCRIPTION_MAX_LENGTH,
            too_short="Project description cannot be empty",
            too_long=f"Project description cannot exceed {PROJECT_DESCRIPTION_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)
    links: Annotated[
        list[str],
        _each(lambda link: bool(URL_PATTERN.match(link)), "Project links must be valid URLs"),
    ] = Field(default_factory=list)
    technologies: Annotated[
        list[str],
        _each(
            lambda tech: len(tech) <= TECHNOLOGY_MAX_LENGTH,
            f"Technology names cannot exceed {TECHNOLOGY_MAX_LENGTH} characters",
        ),
    ] = Field(default_factory=list)
    image_url: str | None = None
    is_public: bool = True


class WorkRequest(RequestModel):
    company: Annotated[
        str,
        required("Company name is required"),
        length(
            1,
            COMPANY_MAX_LENGTH,
            too_short="Company name cannot be empty",
            too_long=f"Company name cannot exceed {COMPANY_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)
    position: Annotated[
        str,
        required("Position is required"),
        length(
            1,
            POSITION_MAX_LENGTH,
            too_short="Position cannot be empty",
            too_long=f"Position cannot exceed {POSITION_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)
    description: Annotated[
        str,
        required("Work description is required"),
        length(
            1,
            WORK_DESCRIPTION_MAX_LENGTH,
            too_short="Work description cannot be empty",
            too_long=f"Work description cannot exceed {WORK_DESCRIPTION_MAX_LENGTH} characters",
        ),
    ] = Field(default=None, validate_default=True)
    start_date: Annotated[
        str,
        required("Start date is required"),
        pattern(DATE_PATTERN, "Start date must be in YYYY-MM-DD format"),
    ] = Field(default=None, validate_default=True)
    end_date: Annotated[
        str,
        pattern(DATE_PATTERN, "End date must be in YYYY-MM-DD format", allow_empty=True),
    ] = ""
    is_current: bool = False
    location: Annotated[
        str | None,
        length(
            max_length=LOCATION_MAX_LENGTH,
            too_long=f"Location cannot exceed {LOCATION_MAX_LENGTH} characters",
        ),
    ] = None


def _social_link(label: str):
    return Annotated[
        str,
        pattern(
            URL_PATTERN,
            f"{label} link must be a valid URL starting with http:// or https://",
            allow_empty=True,
        ),
    ]


GitHubLink = _social_link("GitHub")
LinkedInLink = _social_link("LinkedIn")
PortfolioLink = _social_link("Portfolio")
WebsiteLink = _social_link("Website")


class LinksRequest(RequestModel):
    """Social links to merge over the stored ones. Empty string clears a link."""

    github: GitHubLink = None
    linkedin: LinkedInLink = None
    portfolio: PortfolioLink = None
    website: WebsiteLink = None


# =============================================================================
# Responses
# =============================================================================


def user_to_dict(user) -> dict:
    """Public account info. Never includes the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "isActive": user.is_active,
        "lastLogin": user.last_login,
        "createdAt": user.created_at,
    }
