"""
Integration tests for the HTTP API with repositories replaced by in-memory fakes.
"""

from decimal import Decimal
from fastapi.testclient import TestClient

from hourbook.domain.models.project import ProjectStatus
from hourbook.domain.services.access_policy import Caller
from hourbook.infrastructure.auth.dependencies import (
    get_current_caller,
    get_dispatch_repository,
    get_identity_provider,
    get_invoice_gateway,
    get_project_repository,
    get_time_entry_repository,
    get_user_repository,
)
from hourbook.main import app
from fakes import FakeIdentityProvider, RecordingGateway, Workspace


class ApiTestCase:

    def setup_method(self):
        self.ws = Workspace()
        self.gateway = RecordingGateway()
        self.provider = FakeIdentityProvider()
        self.caller = Caller(Workspace.ADMIN_ID, "admin")

        app.dependency_overrides[get_current_caller] = lambda: self.caller
        app.dependency_overrides[get_user_repository] = lambda: self.ws.users
        app.dependency_overrides[get_project_repository] = lambda: self.ws.projects
        app.dependency_overrides[get_time_entry_repository] = lambda: self.ws.entries
        app.dependency_overrides[get_dispatch_repository] = lambda: self.ws.dispatches
        app.dependency_overrides[get_invoice_gateway] = lambda: self.gateway
        app.dependency_overrides[get_identity_provider] = lambda: self.provider
        self.client = TestClient(app)

    def teardown_method(self):
        app.dependency_overrides.clear()

    def as_employee(self):
        self.caller = Caller(Workspace.EMPLOYEE_ID, "employee")


class TestHealth(ApiTestCase):

    def test_health(self):
        response = self.client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unknown_path(self):
        response = self.client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["path"] == "/api/v1/nothing-here"


class TestProjectsApi(ApiTestCase):

    def test_board_has_three_columns(self):
        self.ws.add_project("Website")
        self.ws.add_project("Audit", status=ProjectStatus.TO_INVOICE)

        response = self.client.get("/api/v1/projects")

        assert response.status_code == 200
        columns = {column["status"]: column for column in response.json()["columns"]}
        assert list(columns) == ["active", "to-invoice", "completed"]
        assert [p["name"] for p in columns["to-invoice"]["projects"]] == ["Audit"]

    def test_create_project(self):
        response = self.client.post("/api/v1/projects", json={"name": "Webshop", "client": "Beta BV"})

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert Decimal(body["hourly_rate"]) == Decimal("75")
        assert body["created_by"] == Workspace.ADMIN_ID

    def test_create_project_without_name(self):
        response = self.client.post("/api/v1/projects", json={"name": " ", "client": "Beta BV"})

        assert response.status_code == 422

    def test_missing_project_keeps_detail(self):
        response = self.client.get("/api/v1/projects/999")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "ENTITY_NOT_FOUND"

    def test_employee_cannot_move_foreign_project(self):
        project = self.ws.add_project()
        self.as_employee()

        response = self.client.patch(f"/api/v1/projects/{project.id}/status", json={"status": "completed"})

        assert response.status_code == 403
        assert self.ws.projects.get_by_id(project.id).status == ProjectStatus.ACTIVE

    def test_delete_project_removes_entries(self):
        project = self.ws.add_project()
        self.ws.log(project, 2)
        self.ws.log(project, 1)

        response = self.client.delete(f"/api/v1/projects/{project.id}")

        assert response.status_code == 200
        assert response.json()["removed_time_entries"] == 2
        assert self.ws.entries.list_all() == []


class TestTimeEntriesApi(ApiTestCase):

    def test_log_time(self):
        project = self.ws.add_project()
        self.as_employee()

        response = self.client.post("/api/v1/time-entries", json={
            "project_id": project.id,
            "description": "Design",
            "hours": "1.5",
            "date": "2024-03-05"
        })

        assert response.status_code == 201
        body = response.json()
        assert body["date"] == "2024-03-05"
        assert Decimal(body["hourly_rate"]) == Decimal("60")
        assert Decimal(body["value"]) == Decimal("90")

    def test_employee_sees_only_own_entries(self):
        project = self.ws.add_project()
        self.ws.log(project, 2)
        self.ws.log(project, 3, user_id=Workspace.ADMIN_ID)
        self.as_employee()

        response = self.client.get("/api/v1/time-entries")

        body = response.json()
        assert len(body["entries"]) == 1
        assert body["is_admin"] is False
        assert body["users"] == []

    def test_export_csv(self):
        project = self.ws.add_project()
        self.ws.log(project, 2, description="Design")

        response = self.client.get("/api/v1/time-entries/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="tijdregistratie_' in response.headers["content-disposition"]
        assert "Werknemer" in response.text.splitlines()[0]
        assert "Design" in response.text


class TestUsersApi(ApiTestCase):

    def test_me(self):
        response = self.client.get("/api/v1/users/me")

        assert response.status_code == 200
        assert response.json()["email"] == "anna@example.com"
        assert response.json()["role"] == "admin"

    def test_change_hourly_rate(self):
        response = self.client.patch("/api/v1/users/me/hourly-rate", json={"hourly_rate": "95"})

        assert response.status_code == 200
        assert self.ws.users.get_by_id(Workspace.ADMIN_ID).hourly_rate == Decimal("95")

    def test_directory_is_admin_only(self):
        self.as_employee()

        response = self.client.get("/api/v1/users")

        assert response.status_code == 403


class TestAuthApi(ApiTestCase):

    def test_sign_up_and_sign_in(self):
        signup = self.client.post("/api/v1/auth/signup", json={
            "email": "jan@example.com",
            "password": "geheim1",
            "full_name": "Jan Jansen",
            "role": "employee"
        })

        signin = self.client.post("/api/v1/auth/signin", json={
            "email": "jan@example.com",
            "password": "geheim1"
        })

        assert signup.status_code == 201
        assert signin.status_code == 200
        assert signin.json()["access_token"] == "token-user-1"

    def test_bad_credentials(self):
        response = self.client.post("/api/v1/auth/signin", json={
            "email": "niemand@example.com",
            "password": "geheim1"
        })

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["detail"]["message"] == "Ongeldige inloggegevens"


class TestBillingApi(ApiTestCase):

    def setup_method(self):
        super().setup_method()
        self.project = self.ws.add_project(status=ProjectStatus.TO_INVOICE)
        self.ws.log(self.project, 2)
        self.ws.log(self.project, 1.5)

    def test_overview(self):
        response = self.client.get("/api/v1/billing")

        assert response.status_code == 200
        body = response.json()
        assert body["project_count"] == 1
        assert Decimal(body["total_amount"]) == Decimal("262.50")

    def test_employee_is_sent_back_to_board(self):
        self.as_employee()

        response = self.client.get("/api/v1/billing")

        assert response.status_code == 403
        assert response.json()["detail"]["redirect_to"] == "/"

    def test_invoice_csv(self):
        response = self.client.get(f"/api/v1/billing/{self.project.id}/csv")

        assert response.status_code == 200
        assert 'attachment; filename="factuur-website-' in response.headers["content-disposition"]
        assert response.text.strip().splitlines()[-1] == ",,,,TOTAAL,3.5,,€262.50"

    def test_send_invoice_once_per_key(self):
        headers = {"Idempotency-Key": "retry-123"}

        first = self.client.post(f"/api/v1/billing/{self.project.id}/send",
                                 json={"provider": "moneybird"}, headers=headers)
        second = self.client.post(f"/api/v1/billing/{self.project.id}/send",
                                  json={"provider": "moneybird"}, headers=headers)

        assert first.status_code == 200
        assert first.json()["already_sent"] is False
        assert second.status_code == 200
        assert second.json()["already_sent"] is True
        assert len(self.gateway.calls) == 1
        assert self.ws.projects.get_by_id(self.project.id).status == ProjectStatus.COMPLETED

    def test_failed_delivery(self):
        self.gateway.fail = True

        response = self.client.post(f"/api/v1/billing/{self.project.id}/send", json={"provider": "twinfield"})

        assert response.status_code == 502
        assert self.ws.projects.get_by_id(self.project.id).status == ProjectStatus.TO_INVOICE
        assert self.ws.dispatches.dispatches == {}
