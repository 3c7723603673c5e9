import io

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _project(**overrides):
    return {
        "title": "Portfolio site",
        "description": "My personal site",
        "technologies": ["React"],
        "links": ["https://example.com"],
        **overrides,
    }


def test_get_own_profile(authorized_client):
    client, headers = authorized_client

    resp = client.get("/api/profile", headers=headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Test User"
    assert data["email"] == "tester@example.com"
    assert data["skills"] == []
    assert data["links"] == {"github": "", "linkedin": "", "portfolio": "", "website": ""}


def test_profile_requires_auth(client):
    assert client.get("/api/profile").status_code == 401


def test_update_profile_partial(authorized_client):
    client, headers = authorized_client

    resp = client.put(
        "/api/profile",
        json={"bio": "Hello", "location": "Lisbon", "isPublic": False},
        headers=headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Profile updated successfully"
    assert body["data"]["bio"] == "Hello"
    assert body["data"]["location"] == "Lisbon"
    assert body["data"]["isPublic"] is False
    assert body["data"]["name"] == "Test User"


def test_post_profile_updates_existing(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/profile", json={"education": "MIT"}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["education"] == "MIT"


def test_update_profile_validation(authorized_client):
    client, headers = authorized_client

    resp = client.put("/api/profile", json={"bio": "x" * 501}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Bio cannot exceed 500 characters"
    assert resp.json()["errors"] == [{"field": "bio", "message": "Bio cannot exceed 500 characters"}]

    resp = client.put("/api/profile", json={"avatar": "ftp://nope"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Avatar must be a valid URL"


def test_add_skill_twice_keeps_one(authorized_client):
    client, headers = authorized_client

    first = client.post("/api/profile/skills", json={"skill": "Go"}, headers=headers)
    second = client.post("/api/profile/skills", json={"skill": "Go"}, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {"success": True, "message": "Skill added successfully", "data": ["Go"]}


def test_skill_validation(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/profile/skills", json={"skill": "x" * 51}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Skill name cannot exceed 50 characters"

    resp = client.post("/api/profile/skills", json={}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Skill name is required"


def test_remove_skill(authorized_client):
    client, headers = authorized_client
    client.post("/api/profile/skills", json={"skill": "Go"}, headers=headers)
    client.post("/api/profile/skills", json={"skill": "Rust"}, headers=headers)

    resp = client.delete("/api/profile/skills/Go", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Skill removed successfully"
    assert resp.json()["data"] == ["Rust"]


def test_project_crud(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/profile/projects", json=_project(), headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Project added successfully"
    project = resp.json()["data"][0]
    assert project["title"] == "Portfolio site"
    assert project["isPublic"] is True
    assert project["technologies"] == ["React"]

    resp = client.put(
        f"/api/profile/projects/{project['id']}",
        json=_project(title="Portfolio v2", isPublic=False),
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Project updated successfully"
    assert resp.json()["data"][0]["title"] == "Portfolio v2"
    assert resp.json()["data"][0]["isPublic"] is False

    resp = client.delete(f"/api/profile/projects/{project['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == []

    # Removing again is a no-op
    resp = client.delete(f"/api/profile/projects/{project['id']}", headers=headers)
    assert resp.status_code == 200


def test_update_missing_project(authorized_client):
    client, headers = authorized_client

    resp = client.put("/api/profile/projects/999", json=_project(), headers=headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Project not found"


def test_project_validation(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/profile/projects", json=_project(links=["not a url"]), headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Project links must be valid URLs"

    resp = client.post("/api/profile/projects", json={"description": "x"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Project title is required"


def test_upload_project_with_image(authorized_client, test_settings, tmp_path):
    client, headers = authorized_client

    resp = client.post(
        "/api/profile/projects/upload",
        data={"title": "Photo app", "description": "Pictures", "technologies": ["Swift", "iOS"]},
        files={"image": ("shot.png", io.BytesIO(PNG_BYTES), "image/png")},
        headers=headers,
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["message"] == "Project added successfully with image"
    project = resp.json()["data"][0]
    assert project["technologies"] == ["Swift", "iOS"]
    assert project["imageUrl"].startswith("/uploads/projects/project-")
    assert project["imageUrl"].endswith(".png")

    stored = list((tmp_path / "uploads" / "projects").iterdir())
    assert len(stored) == 1

    served = client.get(project["imageUrl"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_rejects_non_image(authorized_client, tmp_path):
    client, headers = authorized_client

    resp = client.post(
        "/api/profile/projects/upload",
        data={"title": "Doc", "description": "Not an image"},
        files={"image": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Only image files are allowed (JPEG, PNG, GIF, WebP)"


def test_upload_removes_file_when_validation_fails(authorized_client, tmp_path):
    client, headers = authorized_client

    resp = client.post(
        "/api/profile/projects/upload",
        data={"description": "Missing title"},
        files={"image": ("shot.png", io.BytesIO(PNG_BYTES), "image/png")},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Project title is required"
    upload_dir = tmp_path / "uploads" / "projects"
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_work_crud(authorized_client):
    client, headers = authorized_client
    entry = {
        "company": "Acme",
        "position": "Engineer",
        "description": "Built widgets",
        "startDate": "2020-05-01",
        "isCurrent": True,
    }

    resp = client.post("/api/profile/work", json=entry, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Work experience added successfully"
    work = resp.json()["data"][0]
    assert work["company"] == "Acme"
    assert work["endDate"] == ""

    resp = client.put(
        f"/api/profile/work/{work['id']}",
        json={**entry, "endDate": "2022-01-31", "isCurrent": False},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"][0]["endDate"] == "2022-01-31"

    resp = client.put("/api/profile/work/999", json=entry, headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Work experience not found"

    resp = client.delete(f"/api/profile/work/{work['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_work_date_format(authorized_client):
    client, headers = authorized_client

    resp = client.post(
        "/api/profile/work",
        json={"company": "Acme", "position": "Dev", "description": "x", "startDate": "05/2020"},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Start date must be in YYYY-MM-DD format"


def test_links_merge(authorized_client):
    client, headers = authorized_client

    client.put("/api/profile/links", json={"github": "https://github.com/me"}, headers=headers)
    resp = client.put("/api/profile/links", json={"website": "https://me.dev"}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Links updated successfully"
    assert resp.json()["data"] == {
        "github": "https://github.com/me",
        "linkedin": "",
        "portfolio": "",
        "website": "https://me.dev",
    }

    resp = client.put("/api/profile/links", json={"github": "github.com/me"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "GitHub link must be a valid URL starting with http:// or https://"


def test_public_profile(client, auth_headers):
    headers = auth_headers("public@example.com", "Public Person")
    client.post("/api/profile/projects", json=_project(), headers=headers)
    client.post("/api/profile/projects", json=_project(title="Hidden", isPublic=False), headers=headers)
    user_id = client.get("/api/auth/me", headers=headers).json()["data"]["user"]["id"]

    resp = client.get(f"/api/profile/{user_id}")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Public Person"
    assert "email" not in data
    assert [p["title"] for p in data["projects"]] == ["Portfolio site"]


def test_private_profile_is_404(client, auth_headers):
    headers = auth_headers("private@example.com", "Private Person")
    client.put("/api/profile", json={"isPublic": False}, headers=headers)
    user_id = client.get("/api/auth/me", headers=headers).json()["data"]["user"]["id"]

    resp = client.get(f"/api/profile/{user_id}")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Profile not found or not public"

    assert client.get("/api/profile/424242").status_code == 404
