"""
Billing use cases for the application layer.
Admin-only: the invoiceable working set, CSV exports and sending invoices to providers.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from hourbook.application.cache import EntityCache
from hourbook.application.dto.billing_dto import (
    BillingBundleDTO,
    BillingEntryDTO,
    BillingOverviewResponseDTO,
    BillingProjectDTO,
    CsvExportDTO,
    InvoiceDispatchResponseDTO,
    SendInvoiceRequestDTO,
)
from hourbook.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CommandUseCase,
    QueryUseCase,
)
from hourbook.application.use_cases.time_entry_use_cases import PROJECT, TIME_ENTRY
from hourbook.domain.events.invoice_events import InvoiceSent
from hourbook.domain.events.project_events import ProjectStatusChanged
from hourbook.domain.models.base import BusinessRuleViolation, EntityNotFoundError
from hourbook.domain.models.billing import BillingBundle, InvoiceDispatch, InvoiceProvider
from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.domain.repositories.invoice_dispatch_repository import InvoiceDispatchRepository
from hourbook.domain.repositories.project_repository import ProjectRepository
from hourbook.domain.repositories.time_entry_repository import TimeEntryRepository
from hourbook.domain.services.access_policy import View
from hourbook.domain.services.billing_service import BillingService, billing_rate, round_currency
from hourbook.domain.services.export_service import (
    ExportService,
    canonical_payload,
    idempotency_key,
)
from hourbook.domain.services.invoice_gateway import InvoiceGateway
from hourbook.domain.services.lifecycle_service import LifecycleService

logger = logging.getLogger(__name__)


def bundle_to_dto(bundle: BillingBundle) -> BillingBundleDTO:
    """Bundle as shown in the billing view. Every amount uses the project rate."""
    project = bundle.project
    rate = billing_rate(project)
    return BillingBundleDTO(
        project=BillingProjectDTO(
            id=project.id,
            name=project.name,
            client=project.client,
            status=project.status.value,
            hourly_rate=project.hourly_rate
        ),
        time_entries=[
            BillingEntryDTO(
                id=entry.id,
                entry_date=entry.entry_date,
                user_name=entry.logger_name,
                description=entry.description,
                hours=entry.hours,
                amount=round_currency(entry.hours * rate)
            )
            for entry in bundle.time_entries
        ],
        entry_count=bundle.entry_count,
        total_hours=bundle.total_hours,
        total_amount=round_currency(bundle.total_amount)
    )


class _BillingUseCase(AuthorizedUseCase):
    """Admin gate and bundle assembly shared by billing use cases."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        time_entry_repository: TimeEntryRepository,
        billing_service: Optional[BillingService] = None,
        export_service: Optional[ExportService] = None,
        cache: Optional[EntityCache] = None
    ):
        super().__init__()
        self.project_repository = project_repository
        self.time_entry_repository = time_entry_repository
        self.billing_service = billing_service or BillingService()
        self.export_service = export_service or ExportService()
        self.cache = cache or EntityCache()

    async def _check_authorization(self, request) -> None:
        self._require(View.BILLING)

    def _working_set(self) -> List[BillingBundle]:
        projects = LifecycleService.billing_working_set(
            self.cache.get_list(
                PROJECT,
                ProjectStatus.TO_INVOICE.value,
                lambda: self.project_repository.list_by_status(ProjectStatus.TO_INVOICE)
            )
        )
        entries = self.time_entry_repository.list_by_projects([project.id for project in projects])
        return self.billing_service.build_billing_bundles(projects, entries)

    def _load_project(self, project_id: int) -> Project:
        project = self.cache.get(PROJECT, project_id, self.project_repository.get_by_id)
        if not project:
            raise EntityNotFoundError("Project", project_id)
        return project

    def _bundle(self, project_id: int) -> BillingBundle:
        """Bundle of one project in the working set; anything else is not billable."""
        project = self._load_project(project_id)
        if not project.is_invoiceable:
            raise BusinessRuleViolation(
                f"Project '{project.name}' staat niet op Te Factureren"
            )
        entries = self.time_entry_repository.list_by_project(project_id)
        return self.billing_service.summarize_project(project, entries)


class GetBillingOverviewUseCase(_BillingUseCase, QueryUseCase[Optional[str], BillingOverviewResponseDTO]):
    """Billing view: projects with status to-invoice, optionally searched by name or client."""

    async def _execute_business_logic(self, search: Optional[str]) -> BillingOverviewResponseDTO:
        bundles = self.billing_service.search_bundles(self._working_set(), search)
        totals = self.billing_service.portfolio_totals(bundles)
        return BillingOverviewResponseDTO(
            bundles=[bundle_to_dto(bundle) for bundle in bundles],
            total_amount=round_currency(totals.total_amount),
            total_hours=totals.total_hours,
            project_count=totals.project_count,
            search=search or None
        )


class GetBillingBundleUseCase(_BillingUseCase, QueryUseCase[int, BillingBundleDTO]):

    async def _execute_business_logic(self, project_id: int) -> BillingBundleDTO:
        return bundle_to_dto(self._bundle(project_id))


class ExportBillingCsvUseCase(_BillingUseCase, QueryUseCase[int, CsvExportDTO]):
    """Invoice CSV for one project in the working set."""

    async def _execute_business_logic(self, project_id: int) -> CsvExportDTO:
        bundle = self._bundle(project_id)
        return CsvExportDTO(
            filename=self.export_service.billing_filename(bundle),
            content=self.export_service.billing_csv(bundle)
        )


class SendInvoiceUseCase(_BillingUseCase, CommandUseCase[SendInvoiceRequestDTO, InvoiceDispatchResponseDTO]):
    """
    Send a project's invoice to a provider and complete the project.

    A send is keyed by an idempotency key; a retry with a key that was already
    accepted returns the stored dispatch instead of invoicing twice. A failed
    send leaves the project status untouched and records nothing.
    """

    def __init__(
        self,
        *args,
        invoice_gateway: InvoiceGateway,
        dispatch_repository: InvoiceDispatchRepository,
        lifecycle_service: Optional[LifecycleService] = None,
        **kwargs
    ):
        super().__init__(*args, **kwargs)
        self.invoice_gateway = invoice_gateway
        self.dispatch_repository = dispatch_repository
        self.lifecycle_service = lifecycle_service or LifecycleService()
        self.project_id: Optional[int] = None

    def for_project(self, project_id: int) -> "SendInvoiceUseCase":
        self.project_id = project_id
        return self

    async def _check_authorization(self, request) -> None:
        self._require(View.BILLING, write=True)

    async def _execute_command_logic(self, request: SendInvoiceRequestDTO) -> InvoiceDispatchResponseDTO:
        provider = InvoiceProvider.parse(request.provider)
        project = self._load_project(self.project_id)

        if request.idempotency_key:
            existing = self.dispatch_repository.get_by_idempotency_key(request.idempotency_key)
            if existing:
                return self._replay(existing, project)

        bundle = self._bundle(self.project_id)
        payload = self.export_service.build_payload(provider, bundle, invoice_date=date.today())
        key = request.idempotency_key or idempotency_key(provider, project.id, payload)

        existing = self.dispatch_repository.get_by_idempotency_key(key)
        if existing:
            return self._replay(existing, project)

        reference = await self.invoice_gateway.send(provider, payload, key)

        dispatch = self.dispatch_repository.add(InvoiceDispatch(
            project_id=project.id,
            provider=provider,
            reference=reference or self.export_service.payload_reference(payload),
            total_amount=round_currency(bundle.total_amount),
            idempotency_key=key,
            payload=canonical_payload(payload),
            sent_at=datetime.utcnow()
        ))

        self._complete(project)

        self._record_event(InvoiceSent(
            project_id=project.id,
            provider=provider.value,
            reference=dispatch.reference,
            total_amount=str(dispatch.total_amount),
            user_id=self.current_user_id
        ))

        return self._to_response(
            dispatch,
            already_sent=False,
            message=f"Factuur voor {project.name} succesvol verzonden naar {provider.display_name}!"
        )

    def _complete(self, project: Project) -> None:
        old_status = project.status
        if not self.lifecycle_service.mark_invoiced(project):
            return
        try:
            self.project_repository.update_status(project.id, project.status)
        except Exception:
            project.status = old_status
            raise
        finally:
            self.cache.invalidate(PROJECT, project.id)
            self.cache.invalidate(TIME_ENTRY)
        self._record_event(ProjectStatusChanged(
            project_id=project.id,
            user_id=self.current_user_id,
            old_status=old_status.value,
            new_status=project.status.value
        ))

    def _replay(self, dispatch: InvoiceDispatch, project: Project) -> InvoiceDispatchResponseDTO:
        """An earlier send was accepted; finish a status write that may not have happened."""
        if dispatch.project_id != project.id:
            raise BusinessRuleViolation("Idempotency key belongs to another project")

        logger.info(f"Invoice {dispatch.idempotency_key} was already sent, not sending again")
        if project.status == ProjectStatus.TO_INVOICE:
            self._complete(project)

        return self._to_response(
            dispatch,
            already_sent=True,
            message=f"Factuur voor {project.name} was al verzonden naar {dispatch.provider.display_name}."
        )

    @staticmethod
    def _to_response(dispatch: InvoiceDispatch, already_sent: bool, message: str) -> InvoiceDispatchResponseDTO:
        return InvoiceDispatchResponseDTO(
            id=dispatch.id,
            project_id=dispatch.project_id,
            provider=dispatch.provider.value,
            reference=dispatch.reference,
            total_amount=dispatch.total_amount,
            idempotency_key=dispatch.idempotency_key,
            sent_at=dispatch.sent_at,
            already_sent=already_sent,
            message=message
        )
