from conftest import register


def _user_id(client):
    register(client)
    return client.post("/login", json={"email": "a@x.com", "password": "secret1"}).json()["user"]["id"]


def _apply(client, user_id, job_id="j1", applied_date="2025-01-01"):
    return client.post(
        "/api/apply",
        json={
            "userId": user_id,
            "jobId": job_id,
            "title": "Backend Intern",
            "company": "Acme",
            "category": "internship",
            "appliedDate": applied_date,
        },
    )


def test_profile_hides_secrets(client, users):
    user_id = _user_id(client)
    users.update_reset_token("a@x.com", "tok")

    resp = client.get(f"/api/profile/{user_id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "alice"
    assert "password_hash" not in body
    assert "reset_token" not in body


def test_profile_not_found(client):
    resp = client.get("/api/profile/12345")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_apply_and_list_newest_first(client):
    user_id = _user_id(client)
    assert _apply(client, user_id, "j1", "2025-01-01").status_code == 201
    assert _apply(client, user_id, "j2", "2025-03-01").status_code == 201
    assert _apply(client, user_id, "j3", "2025-02-01").status_code == 201

    resp = client.get(f"/api/applied/{user_id}")
    assert resp.status_code == 200
    assert [a["job_id"] for a in resp.json()] == ["j2", "j3", "j1"]


def test_apply_requires_all_fields(client):
    user_id = _user_id(client)
    resp = client.post("/api/apply", json={"userId": user_id, "jobId": "j1"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "All fields are required"}


def test_apply_unknown_user(client):
    assert _apply(client, 999).status_code == 404


def test_applied_empty_for_new_user(client):
    user_id = _user_id(client)
    assert client.get(f"/api/applied/{user_id}").json() == []
