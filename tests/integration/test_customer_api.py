"""
============================================================================
Customer Service v1.0.0
Integration Test: Customer API Endpoints
============================================================================

Reliability Level: L5 High
Input Constraints: FastAPI TestClient, in-memory SQLite, mocked publisher
Side Effects: None (per-test database)

Covers:
- Login and Bearer authentication (SEC-001..005)
- Create/read/list/update/delete round trips over HTTP
- Error body format and status codes (CUS-001, CUS-002)
- Metrics and monitoring endpoints

Python 3.8 Compatible - No union type hints (X | None)
============================================================================
"""

from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api import include_api_routers, register_exception_handlers
from app.api.customers import get_customer_publisher
from app.database.session import get_db
from services.customer_service import CustomerNotificationPublisher


# ============================================================================
# Test App Setup
# ============================================================================

def create_test_app() -> FastAPI:
    """Create FastAPI test application without the startup lifespan."""
    app = FastAPI(title="Customer API Test")
    register_exception_handlers(app)
    include_api_routers(app)
    return app


@pytest.fixture
def publisher():
    return MagicMock(spec=CustomerNotificationPublisher)


@pytest.fixture
def test_app(session_factory, publisher) -> FastAPI:
    app = create_test_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_customer_publisher] = lambda: publisher
    return app


@pytest.fixture
def client(test_app):
    with TestClient(test_app, raise_server_exceptions=False) as test_client:
        yield test_client


def login(client, username: str, password: str) -> dict:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def user_headers(client):
    return login(client, "user", "user")


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "admin")


JOHN = {"firstName": "John", "lastName": "Doe", "age": 30, "dateOfBirth": "1993-01-01"}
JANE = {"firstName": "Jane", "lastName": "Doe", "age": 25, "dateOfBirth": "1998-01-01"}


# ============================================================================
# Authentication
# ============================================================================

class TestAuthentication:

    def test_login_returns_bearer_token(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "admin"})

        assert response.status_code == 200
        body = response.json()
        assert body["tokenType"] == "Bearer"
        assert body["token"]

    def test_login_with_bad_password(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "SEC-004"

    def test_missing_token(self, client):
        response = client.get("/api/customers")

        assert response.status_code == 401
        assert response.json()["error_code"] == "SEC-001"

    def test_wrong_scheme(self, client):
        response = client.get("/api/customers", headers={"Authorization": "Token abc"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "SEC-002"

    def test_invalid_token(self, client):
        response = client.get("/api/customers", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "SEC-003"


# ============================================================================
# Customer CRUD
# ============================================================================

class TestCustomerCrud:

    def test_create_customer(self, client, user_headers, publisher):
        response = client.post("/api/customers", json=JOHN, headers=user_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] is not None
        assert {k: body[k] for k in JOHN} == JOHN

        published = publisher.publish_customer_created.call_args.args[0]
        assert published.id == body["id"]
        assert published.date_of_birth == date(1993, 1, 1)

    def test_create_accepts_snake_case_and_ignores_id(self, client, user_headers):
        payload = {"id": 999, "first_name": "Ann", "last_name": "Lee", "age": 40, "date_of_birth": "1984-04-04"}

        response = client.post("/api/customers", json=payload, headers=user_headers)

        assert response.status_code == 201
        assert response.json()["id"] != 999
        assert response.json()["firstName"] == "Ann"

    def test_create_missing_fields(self, client, user_headers, publisher):
        response = client.post("/api/customers", json={"firstName": "John"}, headers=user_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == 400
        assert body["error_code"] == "CUS-001"
        assert set(body["errors"]) == {"lastName", "age", "dateOfBirth"}
        assert "timestamp" in body
        publisher.publish_customer_created.assert_not_called()

    def test_create_negative_age(self, client, user_headers):
        response = client.post("/api/customers", json={**JOHN, "age": -3}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == {"age": "must be non-negative"}

    def test_create_wrong_types(self, client, user_headers):
        response = client.post(
            "/api/customers",
            json={**JOHN, "age": "thirty", "dateOfBirth": "yesterday"},
            headers=user_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "CUS-001"
        assert {"age", "dateOfBirth"} <= set(body["errors"])

    @pytest.mark.parametrize("age", [True, False, "30", 30.5])
    def test_create_rejects_non_integer_age(self, client, user_headers, publisher, age):
        response = client.post("/api/customers", json={**JOHN, "age": age}, headers=user_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "CUS-001"
        assert set(body["errors"]) == {"age"}
        publisher.publish_customer_created.assert_not_called()

    @pytest.mark.parametrize("age", [2 ** 31, 2 ** 40, 2 ** 63])
    def test_create_rejects_age_outside_column_range(self, client, user_headers, publisher, age):
        response = client.post("/api/customers", json={**JOHN, "age": age}, headers=user_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "CUS-001"
        assert set(body["errors"]) == {"age"}
        publisher.publish_customer_created.assert_not_called()

    def test_age_limit_message(self, client, user_headers):
        response = client.post("/api/customers", json={**JOHN, "age": 2 ** 31}, headers=user_headers)

        assert response.json()["errors"] == {"age": f"must be at most {2 ** 31 - 1}"}

    def test_update_rejects_boolean_age(self, client, user_headers):
        created = client.post("/api/customers", json=JOHN, headers=user_headers).json()

        response = client.put(
            f"/api/customers/{created['id']}",
            json={**JOHN, "age": True},
            headers=user_headers,
        )

        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"age"}
        assert client.get(f"/api/customers/{created['id']}", headers=user_headers).json()["age"] == 30

    def test_get_customer(self, client, user_headers):
        created = client.post("/api/customers", json=JOHN, headers=user_headers).json()

        response = client.get(f"/api/customers/{created['id']}", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_customer(self, client, user_headers):
        response = client.get("/api/customers/12345", headers=user_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "CUS-002"
        assert body["message"] == "Customer not found with ID: 12345"

    def test_non_numeric_id(self, client, user_headers):
        response = client.get("/api/customers/abc", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "CUS-001"

    def test_list_with_life_expectancy(self, client, user_headers):
        client.post("/api/customers", json=JOHN, headers=user_headers)
        client.post("/api/customers", json=JANE, headers=user_headers)

        response = client.get("/api/customers", headers=user_headers)

        assert response.status_code == 200
        customers = response.json()
        assert [c["firstName"] for c in customers] == ["John", "Jane"]
        today = date.today()
        assert date.fromisoformat(customers[0]["estimatedLifeExpectancy"]).year == today.year + 50
        assert date.fromisoformat(customers[1]["estimatedLifeExpectancy"]).year == today.year + 55
        assert all(c["createdAt"] for c in customers)

    def test_update_customer(self, client, user_headers, publisher):
        created = client.post("/api/customers", json=JOHN, headers=user_headers).json()
        publisher.reset_mock()

        response = client.put(
            f"/api/customers/{created['id']}",
            json={"firstName": "Johnny", "lastName": "Doe", "age": 31, "dateOfBirth": "1992-01-01"},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "firstName": "Johnny",
            "lastName": "Doe",
            "age": 31,
            "dateOfBirth": "1992-01-01",
        }
        publisher.publish_customer_created.assert_not_called()

    def test_update_missing_customer(self, client, user_headers):
        response = client.put("/api/customers/777", json=JOHN, headers=user_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUS-002"

    def test_update_invalid_body(self, client, user_headers):
        created = client.post("/api/customers", json=JOHN, headers=user_headers).json()

        response = client.put(
            f"/api/customers/{created['id']}",
            json={**JOHN, "lastName": " "},
            headers=user_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == {"lastName": "must not be blank"}

    def test_delete_customer(self, client, user_headers):
        created = client.post("/api/customers", json=JOHN, headers=user_headers).json()

        response = client.delete(f"/api/customers/{created['id']}", headers=user_headers)

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/api/customers/{created['id']}", headers=user_headers).status_code == 404

    def test_delete_missing_customer(self, client, user_headers):
        response = client.delete("/api/customers/555", headers=user_headers)

        assert response.status_code == 404


# ============================================================================
# Metrics
# ============================================================================

class TestCustomerMetrics:

    def test_metrics_empty(self, client, user_headers):
        response = client.get("/api/customers/metrics", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {
            "averageAge": 0.0,
            "ageStandardDeviation": 0.0,
            "totalCustomers": 0,
            "youngestCustomerAge": 0,
            "oldestCustomerAge": 0,
        }

    def test_metrics_after_creates(self, client, user_headers):
        client.post("/api/customers", json=JOHN, headers=user_headers)
        client.post("/api/customers", json=JANE, headers=user_headers)

        body = client.get("/api/customers/metrics", headers=user_headers).json()

        assert body["totalCustomers"] == 2
        assert body["averageAge"] == 27.5
        assert body["youngestCustomerAge"] == 25
        assert body["oldestCustomerAge"] == 30
        assert body["ageStandardDeviation"] == pytest.approx(12.5 ** 0.5)


# ============================================================================
# Monitoring
# ============================================================================

class TestMonitoring:

    def test_summary_requires_admin(self, client, user_headers):
        response = client.get("/api/monitoring/summary", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "SEC-005"

    def test_summary_for_admin(self, client, admin_headers):
        client.post("/api/customers", json=JOHN, headers=admin_headers)

        response = client.get("/api/monitoring/summary", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["customers"]["totalCustomers"] == 1
        assert body["customers"]["averageAge"] == 30.0
        assert body["customers"]["createdSinceStart"] >= 1
        assert body["process"]["residentMemoryBytes"] > 0
        assert body["process"]["uptimeSeconds"] >= 0

    def test_summary_age_statistics_match_metrics_endpoint(self, client, admin_headers):
        client.post("/api/customers", json=JOHN, headers=admin_headers)
        client.post("/api/customers", json=JANE, headers=admin_headers)

        summary = client.get("/api/monitoring/summary", headers=admin_headers).json()["customers"]
        metrics = client.get("/api/customers/metrics", headers=admin_headers).json()

        assert summary["averageAge"] == pytest.approx(metrics["averageAge"])
        assert summary["ageStandardDeviation"] == pytest.approx(metrics["ageStandardDeviation"])
        assert summary["ageStandardDeviation"] == pytest.approx(12.5 ** 0.5)

    def test_prometheus_exposition(self, client):
        response = client.get("/api/monitoring/prometheus")

        assert response.status_code == 200
        assert "customers_created_total" in response.text
