from core.models import Profile, Project
from core.search.query_builder import (
    SearchFilters,
    advanced_profile_clause,
    clean_text,
    profile_search_clause,
    project_listing_clause,
    split_terms,
)


def _names(session, clause):
    return sorted(name for (name,) in session.query(Profile.name).filter(clause).all())


def test_split_terms_trims_and_drops_empty_items():
    assert split_terms(" react, ,Node.js ,, ") == ["react", "Node.js"]
    assert split_terms("") == []
    assert split_terms(None) == []


def test_clean_text_blank_is_none():
    assert clean_text("   ") is None
    assert clean_text(None) is None
    assert clean_text("  go ") == "go"


def test_search_filters_from_params():
    filters = SearchFilters.from_params(
        q=" design ", skills="react, vue", location=" ", technologies="docker"
    )

    assert filters.query == "design"
    assert filters.skills == ["react", "vue"]
    assert filters.location is None
    assert filters.education is None
    assert filters.technologies == ["docker"]


def test_profile_text_search_is_case_insensitive(test_session, make_profile):
    make_profile("a@example.com", "Alice Smith", bio="Loves PYTHON")
    make_profile("b@example.com", "Bob Jones", location="Berlin")

    assert _names(test_session, profile_search_clause("python")) == ["Alice Smith"]
    assert _names(test_session, profile_search_clause("BERLIN")) == ["Bob Jones"]


def test_wildcards_in_user_input_are_matched_literally(test_session, make_profile):
    make_profile("a@example.com", "Half 50% off")
    make_profile("b@example.com", "Half 500 off")
    make_profile("c@example.com", "c_sharp fan")
    make_profile("d@example.com", "csharp fan")

    assert _names(test_session, profile_search_clause("50%")) == ["Half 50% off"]
    assert _names(test_session, profile_search_clause("c_s")) == ["c_sharp fan"]


def test_private_profiles_never_match(test_session, make_profile):
    make_profile("a@example.com", "Visible Vera")
    make_profile("b@example.com", "Hidden Vera", is_public=False)

    assert _names(test_session, profile_search_clause("vera")) == ["Visible Vera"]


def test_advanced_filters_are_anded(test_session, make_profile):
    make_profile("a@example.com", "Ann", skills=["React"], location="Paris")
    make_profile("b@example.com", "Ben", skills=["React"], location="London")
    make_profile("c@example.com", "Cat", skills=["Go"], location="Paris")

    filters = SearchFilters.from_params(skills="react", location="paris")

    assert _names(test_session, advanced_profile_clause(filters)) == ["Ann"]


def test_advanced_skills_match_any_term_in_any_skill(test_session, make_profile):
    make_profile("a@example.com", "Ann", skills=["ReactJS"])
    make_profile("b@example.com", "Ben", skills=["Vue.js"])
    make_profile("c@example.com", "Cat", skills=["Go"])

    filters = SearchFilters.from_params(skills="react,vue")

    assert _names(test_session, advanced_profile_clause(filters)) == ["Ann", "Ben"]


def test_advanced_project_tech_ignores_private_projects(test_session, make_profile):
    make_profile(
        "a@example.com",
        "Ann",
        projects=[{"title": "Shown", "technologies": ["Docker"]}],
    )
    make_profile(
        "b@example.com",
        "Ben",
        projects=[{"title": "Hidden", "technologies": ["Docker"], "is_public": False}],
    )

    filters = SearchFilters.from_params(technologies="docker")

    assert _names(test_session, advanced_profile_clause(filters)) == ["Ann"]


def test_advanced_text_searches_project_titles(test_session, make_profile):
    make_profile("a@example.com", "Ann", projects=[{"title": "Weather Station"}])
    make_profile("b@example.com", "Ben", projects=[{"title": "Chess Engine"}])

    filters = SearchFilters.from_params(q="weather")

    assert _names(test_session, advanced_profile_clause(filters)) == ["Ann"]


def test_project_listing_requires_public_project_and_profile(test_session, make_profile):
    make_profile(
        "a@example.com",
        "Ann",
        projects=[
            {"title": "Public one", "technologies": ["React"]},
            {"title": "Private one", "technologies": ["React"], "is_public": False},
        ],
    )
    make_profile(
        "b@example.com",
        "Ben",
        is_public=False,
        projects=[{"title": "Owner hidden", "technologies": ["React"]}],
    )

    titles = [
        title
        for (title,) in test_session.query(Project.title)
        .join(Profile, Project.profile_id == Profile.id)
        .filter(project_listing_clause(technologies=["react"]))
        .all()
    ]

    assert titles == ["Public one"]
