"""Admin sign-in and moderation endpoints."""

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def _venue(client, **kw):
    return client.post("/venues", json={"name": "Ale House", "city": "Hoboken", **kw}).json()


def test_admin_routes_require_login(client):
    assert client.get("/admin/reports").status_code == 401
    assert client.post("/admin/reviews/x/hide").status_code == 401
    assert client.get("/auth/me").status_code == 401


def test_bad_token_rejected(client):
    client.cookies.set("access_token", "not-a-jwt")
    assert client.get("/admin/reports").status_code == 401


def test_login_wrong_password(client, admin_user):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
    assert resp.status_code == 401


def test_login_is_case_insensitive_on_email(client, admin_user):
    resp = client.post("/auth/login", json={"email": "  ADMIN@example.com ", "password": ADMIN_PASSWORD})
    assert resp.status_code == 204
    assert client.get("/auth/me").json()["email"] == ADMIN_EMAIL


def test_disabled_admin_cannot_login(client, admin_user, db_session):
    admin_user.is_active = False
    db_session.commit()
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 403


def test_logout_clears_cookie(admin_client):
    assert admin_client.get("/auth/me").status_code == 200
    assert admin_client.post("/auth/logout").status_code == 204
    assert admin_client.get("/auth/me").status_code == 401


def test_moderation_queue_resolve_and_hide(admin_client, admin_user):
    v = _venue(admin_client)
    review = admin_client.post(f"/venues/{v['id']}/reviews", json={"role": "server", "comment": "spam"}).json()
    admin_client.post("/reports", json={"target_type": "review", "target_id": review["id"], "reason": "spam"})
    admin_client.post("/reports", json={"target_type": "venue", "target_id": v["id"]})

    queue = admin_client.get("/admin/reports").json()
    assert queue["open_review_reports"] == 1
    assert queue["open_venue_reports"] == 1
    report = queue["review_reports"][0]
    assert report["reason"] == "spam"
    assert queue["reviews"][review["id"]]["venue_id"] == v["id"]
    assert v["id"] in queue["venues"]

    assert admin_client.post(f"/admin/reports/{report['id']}/resolve").status_code == 200
    # resolution happens once
    assert admin_client.post(f"/admin/reports/{report['id']}/resolve").status_code == 409

    queue = admin_client.get("/admin/reports").json()
    assert queue["open_review_reports"] == 0
    resolved = queue["review_reports"][0]
    assert resolved["resolved_at"] is not None
    assert resolved["resolved_by"] == admin_user.id

    assert admin_client.post(f"/admin/reviews/{review['id']}/hide").status_code == 200
    public = admin_client.get(f"/venues/{v['id']}/reviews").json()
    assert public["reviews"] == []
    assert public["summary"]["total"] == 0
    # hidden reviews stay visible to moderation
    assert admin_client.get("/admin/reports").json()["reviews"][review["id"]]["is_hidden"] is True


def test_resolve_and_hide_missing(admin_client):
    assert admin_client.post("/admin/reports/nope/resolve").status_code == 404
    assert admin_client.post("/admin/reviews/nope/hide").status_code == 404


def test_edit_venue(admin_client):
    _venue(admin_client, name="Other", city="Jersey City")
    v = _venue(admin_client)

    resp = admin_client.patch(
        f"/admin/venues/{v['id']}",
        json={"name": " Ale  House ", "city": "jersesy city", "venue_type": "sports bar"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["venue"]["city"] == "Jersesy City"
    assert body["venue"]["venue_type"] == "Sports Bar"
    assert body["city_suggestion"] == "Jersey City"


def test_edit_venue_validation(admin_client):
    v = _venue(admin_client)
    resp = admin_client.patch(f"/admin/venues/{v['id']}", json={"name": "", "city": "Hoboken"})
    assert resp.status_code == 400
    assert admin_client.patch("/admin/venues/nope", json={"name": "X", "city": "Y"}).status_code == 404


def test_merge_cities(admin_client):
    _venue(admin_client, name="A", city="Jersesy City")
    _venue(admin_client, name="B", city="Jersey City")

    resp = admin_client.post("/admin/cities/merge", json={"from": "jersesy city", "to": "Jersey City"})

    assert resp.status_code == 200
    assert resp.json()["venues_updated"] == 1
    assert admin_client.get("/admin/cities").json() == {"cities": ["Jersey City"]}


def test_merge_same_city_rejected(admin_client):
    resp = admin_client.post("/admin/cities/merge", json={"from": "hoboken", "to": "HOBOKEN"})
    assert resp.status_code == 400


def test_edit_into_existing_venue_points_at_it(admin_client):
    ale = _venue(admin_client)
    other = _venue(admin_client, name="Other Bar")

    resp = admin_client.patch(f"/admin/venues/{other['id']}", json={"name": "ale house", "city": "hoboken"})

    assert resp.status_code == 409
    body = resp.json()
    assert body["existing_venue"]["id"] == ale["id"]
    assert "already exists" in body["detail"]
    assert admin_client.get(f"/venues/{other['id']}").json()["name"] == "Other Bar"


def test_merge_with_namesake_in_target_city(admin_client):
    _venue(admin_client)
    _venue(admin_client, city="Hobokn")

    resp = admin_client.post("/admin/cities/merge", json={"from": "Hobokn", "to": "Hoboken"})

    assert resp.status_code == 409
    assert resp.json()["detail"].startswith("A venue with the same name already exists in Hoboken")
    assert admin_client.get("/admin/cities").json() == {"cities": ["Hobokn", "Hoboken"]}
