"""
Application constants for Portfolio Hub.

Contains the skill category table, field limits and pagination defaults.
"""

# =============================================================================
# Skill Categories
# =============================================================================

# Category -> keywords. A skill belongs to a category when its text contains
# one of the keywords, case-insensitively.
SKILL_CATEGORIES = {
    "Programming Languages": [
        "javascript", "python", "java", "c++", "c#", "go", "rust", "swift",
        "kotlin", "php", "ruby", "scala",
    ],
    "Frontend": [
        "react", "vue", "angular", "html", "css", "sass", "less", "typescript",
        "jquery", "bootstrap", "tailwind",
    ],
    "Backend": [
        "node.js", "express", "django", "flask", "spring", "asp.net", "laravel",
        "rails", "fastapi",
    ],
    "Database": [
        "mongodb", "mysql", "postgresql", "redis", "sqlite", "oracle",
        "sql server", "elasticsearch",
    ],
    "DevOps": [
        "docker", "kubernetes", "aws", "azure", "gcp", "jenkins", "gitlab",
        "github actions", "terraform",
    ],
    "Mobile": ["react native", "flutter", "ios", "android", "xamarin", "ionic"],
    "AI/ML": [
        "tensorflow", "pytorch", "scikit-learn", "opencv", "numpy", "pandas",
        "matplotlib",
    ],
    "Tools": ["git", "vscode", "intellij", "postman", "figma", "adobe", "blender"],
}

CATEGORY_TOP_N = 10

# =============================================================================
# Aggregation Limits
# =============================================================================

SUGGESTIONS_PER_SOURCE = 5
RELATED_SKILLS_POOL = 10
RELATED_SKILLS_LIMIT = 5
SKILL_DETAIL_PROJECT_LIMIT = 10
ADVANCED_SEARCH_PROJECTS_PER_PROFILE = 3
ADVANCED_SEARCH_WORK_PER_PROFILE = 2

# =============================================================================
# Pagination
# =============================================================================

DEFAULT_PAGE_SIZE = 20
SKILLS_PAGE_SIZE = 50
TOP_N_DEFAULT = 10
SUGGESTIONS_DEFAULT = 10
MAX_PAGE_SIZE = 100

# =============================================================================
# Field Limits
# =============================================================================

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
BIO_MAX_LENGTH = 500
EDUCATION_MAX_LENGTH = 200
LOCATION_MAX_LENGTH = 100
SKILL_MAX_LENGTH = 50
TECHNOLOGY_MAX_LENGTH = 50
PROJECT_TITLE_MAX_LENGTH = 100
PROJECT_DESCRIPTION_MAX_LENGTH = 1000
COMPANY_MAX_LENGTH = 100
POSITION_MAX_LENGTH = 100
WORK_DESCRIPTION_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 6

SOCIAL_LINK_KEYS = ("github", "linkedin", "portfolio", "website")

# Search result types accepted by GET /api/search
SEARCH_TYPES = ("all", "profiles", "projects", "skills")

# Image uploads for projects
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
