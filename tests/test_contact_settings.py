CONTACT = {"name": "A", "email": "a@b.com", "subject": "S", "message": "M", "terms": True}


def test_contact_submission_round_trip(admin_client, anon_client):
    response = anon_client.post("/api/contact", json=CONTACT)

    assert response.status_code == 201
    submission_id = response.get_json()["submissionId"]
    assert isinstance(submission_id, int)

    rows = admin_client.get("/api/contact").get_json()
    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == submission_id
    assert {k: row[k] for k in CONTACT} == CONTACT

    single = admin_client.get(f"/api/contact/{submission_id}")
    assert single.get_json()["subject"] == "S"
    assert admin_client.get("/api/contact/999").status_code == 404


def test_contact_requires_terms_and_valid_email(anon_client):
    response = anon_client.post("/api/contact", json={**CONTACT, "terms": False, "email": "nope"})

    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid form data"
    assert {err["field"] for err in body["errors"]} == {"terms", "email"}


def test_contact_listing_requires_admin(anon_client):
    anon_client.post("/api/contact", json=CONTACT)
    assert anon_client.get("/api/contact").status_code == 401


def test_settings_upsert(admin_client, anon_client):
    assert anon_client.get("/api/settings").get_json() == []

    first = admin_client.post("/api/settings", json={"key": "site_name", "value": "Letterly"})
    assert first.status_code == 200
    assert first.get_json()["type"] == "text"

    admin_client.post("/api/settings", json={"key": "site_name", "value": "Letterly", "type": "text"})
    admin_client.post("/api/settings", json={"key": "maintenance", "value": True, "type": "boolean"})

    settings = {s["key"]: s for s in anon_client.get("/api/settings").get_json()}
    assert set(settings) == {"site_name", "maintenance"}
    assert settings["maintenance"]["value"] == "true"
    assert anon_client.get("/api/settings/site_name").get_json()["value"] == "Letterly"
    assert anon_client.get("/api/settings/unknown").status_code == 404


def test_settings_require_key_and_value(admin_client):
    response = admin_client.post("/api/settings", json={"key": "site_name"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Key and value are required"


def test_settings_write_requires_admin(anon_client):
    response = anon_client.post("/api/settings", json={"key": "site_name", "value": "x"})
    assert response.status_code == 401
    assert anon_client.get("/api/settings").get_json() == []


def test_settings_accept_explicit_null_value(admin_client, anon_client):
    admin_client.post("/api/settings", json={"key": "tagline", "value": "Write better"})
    response = admin_client.post("/api/settings", json={"key": "tagline", "value": None})

    assert response.status_code == 200
    assert response.get_json()["value"] is None
    assert anon_client.get("/api/settings/tagline").get_json()["value"] is None
