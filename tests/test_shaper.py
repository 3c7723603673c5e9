from core.search import shaper


def _profile(make_profile, **overrides):
    return make_profile(
        "Owner@Example.com",
        "Owner",
        skills=["Go"],
        projects=[
            {"title": "Open", "technologies": ["Go"], "links": ["https://example.com/open"]},
            {"title": "Closed", "is_public": False},
        ],
        work=[{"company": "Acme"}],
        **overrides,
    )


def test_public_profile_hides_email_and_private_projects(make_profile):
    data = shaper.public_profile(_profile(make_profile))

    assert "email" not in data
    assert [p["title"] for p in data["projects"]] == ["Open"]
    assert data["projects"][0]["technologies"] == ["Go"]
    assert data["projects"][0]["links"] == ["https://example.com/open"]
    assert [w["company"] for w in data["work"]] == ["Acme"]
    assert data["links"] == {"github": "", "linkedin": "", "portfolio": "", "website": ""}


def test_owner_profile_includes_everything(make_profile):
    data = shaper.owner_profile(_profile(make_profile))

    assert data["email"] == "owner@example.com"
    assert [p["title"] for p in data["projects"]] == ["Open", "Closed"]
    assert data["isPublic"] is True
    assert data["version"] >= 1


def test_work_entry_shape(make_profile):
    entry = shaper.work_to_dict(_profile(make_profile).work[0])

    assert entry["company"] == "Acme"
    assert entry["startDate"] == "2020-01-01"
    assert entry["endDate"] == ""
    assert entry["isCurrent"] is False


def test_advanced_result_truncates_projects_and_work(make_profile):
    profile = make_profile(
        "a@example.com",
        "Ann",
        projects=[{"title": f"P{i}"} for i in range(5)] + [{"title": "Private", "is_public": False}],
        work=[{"company": f"C{i}"} for i in range(4)],
    )

    data = shaper.advanced_result(profile)

    assert [p["title"] for p in data["projects"]] == ["P0", "P1", "P2"]
    assert [w["company"] for w in data["work"]] == ["C0", "C1"]
    assert "email" not in data


def test_project_with_owner_summary(make_profile):
    profile = _profile(make_profile)

    data = shaper.public_project_with_owner(profile.projects[0])

    assert data["title"] == "Open"
    assert data["profile"] == {
        "id": profile.id,
        "userId": profile.user_id,
        "name": "Owner",
        "avatar": None,
        "skills": ["Go"],
    }
