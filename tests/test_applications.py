APP = {
    "full_name": "  Alice Doe ",
    "email": " Alice@Example.com ",
    "phone": "555-0100",
    "event_date": "2025-06-14",
    "event_type": "wedding",
    "message": "  We'd love a quote.  ",
}


def submit(client, headers, path="/api/applications", **overrides):
    return client.post(path, json={**APP, **overrides}, headers=headers)


def test_submit_application(client, customer):
    uid, headers = customer
    r = submit(client, headers)
    assert r.status_code == 201
    a = r.json()["application"]
    assert a["user_id"] == uid
    assert a["status"] == "pending"
    assert a["full_name"] == "Alice Doe"
    assert a["email"] == "alice@example.com"
    assert a["message"] == "We'd love a quote."
    assert a["event_date"] == "2025-06-14"


def test_submit_optional_fields(client, customer):
    _, headers = customer
    r = client.post(
        "/api/applications",
        json={"full_name": "A", "email": "a@x.com", "message": "hi", "event_date": ""},
        headers=headers,
    )
    assert r.status_code == 201
    a = r.json()["application"]
    assert a["phone"] is None and a["event_date"] is None and a["event_type"] is None


def test_submit_validation(client, customer):
    _, headers = customer
    for missing in ("full_name", "email", "message"):
        body = {k: v for k, v in APP.items() if k != missing}
        r = client.post("/api/applications", json=body, headers=headers)
        assert r.status_code == 400
        assert r.json()["error"] == "full_name, email and message are required"
    assert submit(client, headers, message="   ").status_code == 400


def test_submit_requires_auth(client):
    assert client.post("/api/applications", json=APP).status_code == 401


def test_visibility_owner_admin_other(client, make_customer, admin_headers):
    _, alice = make_customer("alice@example.com")
    _, bob = make_customer("bob@example.com")
    app_id = submit(client, alice).json()["application"]["id"]

    assert client.get(f"/api/applications/{app_id}", headers=alice).status_code == 200
    r = client.get(f"/api/applications/{app_id}", headers=bob)
    assert (r.status_code, r.json()["error"]) == (403, "Forbidden")
    assert client.get(f"/api/applications/{app_id}", headers=admin_headers).status_code == 200


def test_get_missing_application(client, customer):
    _, headers = customer
    r = client.get("/api/applications/999", headers=headers)
    assert (r.status_code, r.json()["error"]) == (404, "Application not found")
    assert client.get("/api/applications/0", headers=headers).status_code == 400


def test_list_is_admin_only(client, customer, admin_headers):
    _, headers = customer
    submit(client, headers)
    assert client.get("/api/applications", headers=headers).status_code == 403
    body = client.get("/api/applications", headers=admin_headers).json()
    assert (body["page"], body["limit"]) == (1, 20)
    assert len(body["applications"]) == 1


def test_list_newest_first_with_status_filter(client, customer, admin_headers):
    _, headers = customer
    ids = [submit(client, headers, full_name=f"n{i}").json()["application"]["id"] for i in range(3)]
    client.patch(f"/api/applications/{ids[1]}/status", json={"status": "confirmed"}, headers=admin_headers)

    body = client.get("/api/applications", headers=admin_headers).json()
    assert [a["id"] for a in body["applications"]] == ids[::-1]

    body = client.get("/api/applications", params={"status": " confirmed "}, headers=admin_headers).json()
    assert [a["id"] for a in body["applications"]] == [ids[1]]
    body = client.get("/api/applications", params={"status": "pending", "limit": 1}, headers=admin_headers).json()
    assert [a["id"] for a in body["applications"]] == [ids[2]]


def test_update_status(client, customer, admin_headers):
    _, headers = customer
    created = submit(client, headers).json()["application"]
    r = client.patch(f"/api/applications/{created['id']}/status", json={"status": "  confirmed "}, headers=admin_headers)
    assert r.status_code == 200
    updated = r.json()["application"]
    assert updated["status"] == "confirmed"
    assert updated["updated_at"] >= created["updated_at"]


def test_update_status_free_form_and_errors(client, customer, admin_headers):
    _, headers = customer
    app_id = submit(client, headers).json()["application"]["id"]
    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "on hold"}, headers=admin_headers)
    assert r.json()["application"]["status"] == "on hold"

    r = client.patch(f"/api/applications/{app_id}/status", json={}, headers=admin_headers)
    assert (r.status_code, r.json()["error"]) == (400, "status is required")
    r = client.patch("/api/applications/999/status", json={"status": "x"}, headers=admin_headers)
    assert r.status_code == 404
    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "x"}, headers=headers)
    assert r.status_code == 403


def test_legacy_paths_share_behaviour(client, make_customer, admin_headers):
    _, alice = make_customer("alice@example.com")
    _, bob = make_customer("bob@example.com")

    r = submit(client, alice, path="/apply")
    assert r.status_code == 201
    app_id = r.json()["application"]["id"]
    assert submit(client, alice, path="/apply", email="").status_code == 400

    assert client.get(f"/api/customers/{app_id}", headers=bob).status_code == 403
    assert client.get(f"/api/customers/{app_id}", headers=alice).status_code == 200

    assert client.get("/applications", headers=alice).status_code == 403
    body = client.get("/applications", headers=admin_headers).json()
    assert [a["id"] for a in body["applications"]] == [app_id]
    assert client.get("/api/customers", headers=admin_headers).json() == body


def test_numeric_phone_and_event_type_are_kept_as_text(client, customer):
    _, headers = customer
    r = submit(client, headers, phone=5551234, event_type=2025)
    assert r.status_code == 201
    a = r.json()["application"]
    assert (a["phone"], a["event_type"]) == ("5551234", "2025")


def test_list_paging_parses_leading_integer(client, customer, admin_headers):
    _, headers = customer
    submit(client, headers)
    r = client.get("/api/applications", params={"page": "1.5", "limit": "abc"}, headers=admin_headers)
    assert r.status_code == 200
    assert (r.json()["page"], r.json()["limit"]) == (1, 20)
    assert len(r.json()["applications"]) == 1
