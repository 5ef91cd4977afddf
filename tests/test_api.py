"""
HTTP tests: authentication, role scoping and the occupancy routes end to end.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import dependencies
from database import get_session
from dependencies import get_cache
from main import app
from models import UserRole


def auth(user_id):
    token = jwt.encode({"sub": user_id}, dependencies.SECRET_KEY, algorithm=dependencies.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(session_factory):
    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_cache] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def root(make_user):
    make_user("root", role=UserRole.SUPER_ADMIN)
    return auth("root")


@pytest.fixture
def grace(make_user):
    make_user("grace", role=UserRole.ADMIN)
    return auth("grace")


def _create(client, path, headers, **body):
    response = client.post(path, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _tenant_body(name):
    return {"name": name, "email": f"{name.split()[0].lower()}@example.com", "phone": "+254700000000",
            "id_number": "12345678"}


class TestAuthentication:

    def test_health_needs_no_token(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_missing_token(self, client):
        assert client.get("/api/properties").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/properties", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403

    def test_account_without_a_role_record(self, client):
        response = client.get("/api/properties", headers=auth("ghost"))
        assert response.status_code == 403


class TestScoping:

    def test_admin_sees_and_touches_only_their_properties(self, client, root, grace):
        other = _create(client, "/api/properties", root, name="Other Court", address="1 Other Road")
        mine = _create(client, "/api/properties", grace, name="Mine Apartments", address="2 My Road")

        assert mine["manager_id"] == "grace"
        assert mine["manager_name"] == "Grace"
        assert client.get("/api/users/me", headers=grace).json()["property_ids"] == [mine["id"]]

        listed = client.get("/api/properties", headers=grace).json()
        assert [p["name"] for p in listed] == ["Mine Apartments"]
        everything = client.get("/api/properties", headers=root).json()
        assert [p["name"] for p in everything] == ["Mine Apartments", "Other Court"]

        assert client.get(f"/api/properties/{other['id']}", headers=grace).status_code == 403
        response = client.post(
            "/api/units",
            json={"property_id": other["id"], "unit_number": "A1", "rent": 100},
            headers=grace,
        )
        assert response.status_code == 403

    def test_dashboard_stats_are_scoped(self, client, root, grace):
        other = _create(client, "/api/properties", root, name="Other Court", address="1 Other Road")
        _create(client, "/api/units", root, property_id=other["id"], unit_number="B1", rent=10000)

        mine = _create(client, "/api/properties", grace, name="Mine Apartments", address="2 My Road")
        first = _create(client, "/api/units", grace, property_id=mine["id"], unit_number="A1", rent=25000)
        _create(client, "/api/units", grace, property_id=mine["id"], unit_number="A2", rent=20000)
        _create(client, "/api/tenants", grace, unit_id=first["id"], **_tenant_body("Jane Wanjiku"))

        stats = client.get("/api/dashboard/stats", headers=grace).json()
        assert stats["total_properties"] == 1
        assert stats["total_units"] == 2
        assert stats["occupied_units"] == 1
        assert stats["total_tenants"] == 1
        assert stats["occupancy_rate"] == 0.5
        assert float(stats["total_revenue"]) == 25000

        stats = client.get("/api/dashboard/stats", headers=root).json()
        assert stats["total_properties"] == 2
        assert stats["total_units"] == 3
        assert stats["occupancy_rate"] == pytest.approx(1 / 3)

    def test_activity_feed(self, client, grace):
        _create(client, "/api/properties", grace, name="Mine Apartments", address="2 My Road")
        feed = client.get("/api/dashboard/activities", headers=grace).json()
        assert [a["action"] for a in feed] == ["Added property Mine Apartments"]

    def test_only_super_admins_manage_users(self, client, root, grace):
        body = {"id": "new-uid", "email": "new@example.com", "name": "New", "role": "admin"}
        assert client.post("/api/users", json=body, headers=grace).status_code == 403
        assert client.get("/api/dashboard/integrity", headers=grace).status_code == 403

        created = _create(client, "/api/users", root, **body)
        assert created["role"] == "admin"
        assert created["property_ids"] == []
        assert client.get("/api/dashboard/integrity", headers=root).json() == []

    @pytest.fixture
    def neighbours(self, client, root, grace):
        """Jane lives in a unit outside Grace's scope; Grace manages a vacant unit of her own."""
        other = _create(client, "/api/properties", root, name="Other Court", address="1 Other Road")
        theirs = _create(client, "/api/units", root, property_id=other["id"], unit_number="B1", rent=10000)
        jane = _create(client, "/api/tenants", root, unit_id=theirs["id"], **_tenant_body("Jane Wanjiku"))
        mine = _create(client, "/api/properties", grace, name="Mine Apartments", address="2 My Road")
        own = _create(client, "/api/units", grace, property_id=mine["id"], unit_number="A1", rent=25000)
        return jane, theirs, own

    def test_lease_cannot_move_a_tenant_out_of_another_property(self, client, root, grace, neighbours):
        jane, theirs, own = neighbours
        assert client.get(f"/api/units/{theirs['id']}", headers=grace).status_code == 403

        response = client.post("/api/leases", json={
            "tenant_id": jane["id"], "unit_id": own["id"], "property_id": own["property_id"],
            "monthly_rent": 25000, "start_date": "2026-11-01T00:00:00Z", "end_date": "2027-10-31T00:00:00Z",
        }, headers=grace)

        assert response.status_code == 403
        unit = client.get(f"/api/units/{theirs['id']}", headers=root).json()
        assert unit["status"] == "occupied"
        assert unit["tenant_id"] == jane["id"]
        assert client.get(f"/api/units/{own['id']}", headers=grace).json()["status"] == "vacant"

    def test_payments_and_requests_name_only_tenants_of_the_property(self, client, grace, neighbours):
        jane, _, own = neighbours

        response = client.post("/api/payments", json={
            "tenant_id": jane["id"], "unit_id": own["id"], "property_id": own["property_id"],
            "amount": 25000, "due_date": "2026-11-05T00:00:00Z",
        }, headers=grace)
        assert response.status_code == 422
        assert "not registered at property" in response.json()["detail"]

        response = client.post("/api/maintenance", json={
            "property_id": own["property_id"], "tenant_id": jane["id"], "title": "Leak", "description": "Tap",
        }, headers=grace)
        assert response.status_code == 422

        assert client.get("/api/payments", headers=grace).json() == []
        assert client.get("/api/maintenance", headers=grace).json() == []


class TestOccupancyRoutes:

    @pytest.fixture
    def unit(self, client, root):
        prop = _create(client, "/api/properties", root, name="Sunrise Apartments", address="12 Ngong Road")
        return _create(client, "/api/units", root, property_id=prop["id"], unit_number="A1", rent=25000,
                       deposit=50000)

    def test_assign_conflict_and_release(self, client, root, unit):
        assert unit["status"] == "vacant"
        jane = _create(client, "/api/tenants", root, **_tenant_body("Jane Wanjiku"))
        peter = _create(client, "/api/tenants", root, **_tenant_body("Peter Otieno"))

        response = client.post(f"/api/units/{unit['id']}/assign", json={"tenant_id": jane["id"]}, headers=root)
        assert response.status_code == 200
        assert response.json()["status"] == "occupied"
        assert response.json()["tenant_name"] == "Jane Wanjiku"

        response = client.post(f"/api/units/{unit['id']}/assign", json={"tenant_id": peter["id"]}, headers=root)
        assert response.status_code == 409
        assert "not vacant" in response.json()["detail"]

        tenant = client.get(f"/api/tenants/{jane['id']}", headers=root).json()
        assert tenant["unit_id"] == unit["id"]
        assert float(tenant["rent"]) == 25000

        response = client.post(f"/api/units/{unit['id']}/release", headers=root)
        assert response.json()["status"] == "vacant"
        assert client.get(f"/api/tenants/{jane['id']}", headers=root).json()["unit_id"] is None

    def test_occupancy_cannot_be_edited_directly(self, client, root, unit):
        response = client.put(f"/api/units/{unit['id']}", json={"status": "occupied"}, headers=root)
        assert response.status_code == 422

    def test_lease_renewal_and_termination(self, client, root, unit):
        jane = _create(client, "/api/tenants", root, **_tenant_body("Jane Wanjiku"))
        now = datetime.now(timezone.utc)

        lease = _create(
            client, "/api/leases", root,
            tenant_id=jane["id"], unit_id=unit["id"], property_id=unit["property_id"], monthly_rent=25000,
            start_date=(now - timedelta(days=375)).isoformat(), end_date=(now - timedelta(days=10)).isoformat(),
        )
        assert lease["status"] == "expired"
        assert lease["days_remaining"] < 0
        assert client.get(f"/api/units/{unit['id']}", headers=root).json()["tenant_id"] == jane["id"]

        response = client.post(
            f"/api/leases/{lease['id']}/renew",
            json={"new_end_date": (now + timedelta(days=365)).isoformat()},
            headers=root,
        )
        assert response.status_code == 200
        renewed = response.json()
        assert renewed["status"] == "active"
        assert renewed["last_renewal_date"] is not None

        response = client.post(f"/api/leases/{lease['id']}/terminate", headers=root)
        assert response.json()["status"] == "terminated"
        assert client.get(f"/api/units/{unit['id']}", headers=root).json()["status"] == "vacant"

        response = client.post(
            f"/api/leases/{lease['id']}/renew",
            json={"new_end_date": (now + timedelta(days=400)).isoformat()},
            headers=root,
        )
        assert response.status_code == 409

    def test_lease_terms_cannot_be_cleared(self, client, root, unit):
        jane = _create(client, "/api/tenants", root, **_tenant_body("Jane Wanjiku"))
        lease = _create(
            client, "/api/leases", root,
            tenant_id=jane["id"], unit_id=unit["id"], property_id=unit["property_id"], monthly_rent=25000,
            start_date="2026-11-01T00:00:00Z", end_date="2027-10-31T00:00:00Z",
        )

        response = client.put(f"/api/leases/{lease['id']}", json={"renewal_option": None}, headers=root)
        assert response.status_code == 422
        assert "renewal_option cannot be null" in response.text

        response = client.put(
            f"/api/leases/{lease['id']}", json={"renewal_option": True, "parking_spaces": None}, headers=root,
        )
        assert response.status_code == 200
        assert response.json()["renewal_option"] is True
        assert response.json()["parking_spaces"] is None

    def test_errors_map_to_status_codes(self, client, root, unit):
        assert client.get("/api/units/nope", headers=root).status_code == 404
        response = client.post(
            "/api/units",
            json={"property_id": "missing", "unit_number": "Z1", "rent": 1},
            headers=root,
        )
        assert response.status_code == 422
        response = client.post(
            "/api/properties",
            json={"name": "X", "address": "Y", "owner": "someone"},
            headers=root,
        )
        assert response.status_code == 422
        # Units still reference the property
        assert client.delete(f"/api/properties/{unit['property_id']}", headers=root).status_code == 409
