"""
Integration tests for sending invoices against the SQLAlchemy repositories.
Each request gets its own session and ends the way get_db ends it.
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

import hourbook.infrastructure.db.models  # noqa: F401
from hourbook.application.cache import EntityCache
from hourbook.application.dto.billing_dto import SendInvoiceRequestDTO
from hourbook.application.use_cases.billing_use_cases import SendInvoiceUseCase
from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.models.user import User, UserRole
from hourbook.domain.services.access_policy import Caller
from hourbook.infrastructure.db.database import Base, build_engine
from hourbook.infrastructure.repositories import (
    SQLAlchemyInvoiceDispatchRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyTimeEntryRepository,
    SQLAlchemyUserRepository,
)
from fakes import RecordingGateway


class UnreliableProjectRepository(SQLAlchemyProjectRepository):
    """Project repository whose first status writes fail inside the store."""

    def __init__(self, session, failures=1):
        super().__init__(session)
        self.failures = failures

    def update_status(self, project_id, status):
        if self.failures:
            self.failures -= 1
            with self._store_operation("projects.update_status"):
                raise OperationalError("UPDATE projects SET status=?", {}, Exception("database is locked"))
        return super().update_status(project_id, status)


class TestSendInvoiceWithSql:

    @pytest.fixture(autouse=True)
    def database(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'hourbook-invoices.db'}")
        Base.metadata.create_all(bind=engine)
        self.session_factory = sessionmaker(bind=engine, autoflush=False)
        self.gateway = RecordingGateway()
        self.admin = Caller("admin-1", "admin")

        session = self.session_factory()
        SQLAlchemyUserRepository(session).save(User(
            id="admin-1", email="anna@example.com", full_name="Anna Admin", role=UserRole.ADMIN
        ))
        project = SQLAlchemyProjectRepository(session).save(Project(
            name="Website", client="Acme BV", created_by="admin-1",
            status=ProjectStatus.TO_INVOICE, hourly_rate=Decimal("75")
        ))
        for hours in ("2", "1.5"):
            SQLAlchemyTimeEntryRepository(session).add(TimeEntry(
                project_id=project.id, user_id="admin-1", description="Work",
                hours=Decimal(hours), entry_date=date(2024, 3, 5)
            ))
        session.commit()
        session.close()
        self.project_id = project.id

        yield
        engine.dispose()

    async def send(self, request, status_failures=0):
        session = self.session_factory()
        try:
            use_case = SendInvoiceUseCase(
                UnreliableProjectRepository(session, failures=status_failures),
                SQLAlchemyTimeEntryRepository(session),
                invoice_gateway=self.gateway,
                dispatch_repository=SQLAlchemyInvoiceDispatchRepository(session),
                cache=EntityCache()
            ).set_caller(self.admin).for_project(self.project_id)
            result = await use_case.execute(request)
            if result.success:
                session.commit()
            else:
                session.rollback()
            return result
        finally:
            session.close()

    def stored(self):
        session = self.session_factory()
        try:
            project = SQLAlchemyProjectRepository(session).get_by_id(self.project_id)
            dispatches = SQLAlchemyInvoiceDispatchRepository(session).list_by_project(self.project_id)
            return project, dispatches
        finally:
            session.close()

    @pytest.mark.asyncio
    async def test_send_completes_project(self):
        result = await self.send(SendInvoiceRequestDTO(provider="twinfield"))

        project, dispatches = self.stored()
        assert result.success is True
        assert result.data.total_amount == Decimal("262.50")
        assert project.status == ProjectStatus.COMPLETED
        assert [d.provider.value for d in dispatches] == ["twinfield"]

    @pytest.mark.asyncio
    async def test_lost_status_write_is_finished_without_sending_again(self):
        request = SendInvoiceRequestDTO(provider="moneybird", idempotency_key="retry-123")

        first = await self.send(request, status_failures=1)

        project, dispatches = self.stored()
        assert first.error_code == "STORE_ERROR"
        assert project.status == ProjectStatus.TO_INVOICE
        assert [d.idempotency_key for d in dispatches] == ["retry-123"]

        retry = await self.send(request)

        project, dispatches = self.stored()
        assert retry.success is True
        assert retry.data.already_sent is True
        assert len(self.gateway.calls) == 1
        assert len(dispatches) == 1
        assert project.status == ProjectStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_failed_delivery_records_nothing(self):
        self.gateway.fail = True

        result = await self.send(SendInvoiceRequestDTO(provider="moneybird"))

        project, dispatches = self.stored()
        assert result.error_code == "INVOICE_DELIVERY_ERROR"
        assert project.status == ProjectStatus.TO_INVOICE
        assert dispatches == []
