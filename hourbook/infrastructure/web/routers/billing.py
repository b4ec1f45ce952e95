"""
Billing router. Admins only.
The invoiceable working set, invoice CSVs and sending invoices to providers.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Header, Query

from hourbook.application.cache import EntityCache
from hourbook.application.dto.billing_dto import (
    BillingBundleDTO,
    BillingOverviewResponseDTO,
    InvoiceDispatchResponseDTO,
    SendInvoiceRequestDTO,
)
from hourbook.application.use_cases.billing_use_cases import (
    ExportBillingCsvUseCase,
    GetBillingBundleUseCase,
    GetBillingOverviewUseCase,
    SendInvoiceUseCase,
)
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.billing_service import BillingService
from hourbook.domain.services.export_service import ExportService
from hourbook.domain.services.invoice_gateway import InvoiceGateway
from hourbook.domain.services.lifecycle_service import LifecycleService
from hourbook.infrastructure.auth.dependencies import (
    get_billing_service,
    get_dispatch_repository,
    get_entity_cache,
    get_export_service,
    get_invoice_gateway,
    get_lifecycle_service,
    get_project_repository,
    get_time_entry_repository,
    require_admin,
)
from hourbook.infrastructure.repositories import (
    SQLAlchemyInvoiceDispatchRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyTimeEntryRepository,
)
from hourbook.infrastructure.web.middleware.error_handler import unwrap
from hourbook.infrastructure.web.responses import csv_response


router = APIRouter()

AdminCaller = Annotated[Caller, Depends(require_admin)]


class BillingUseCaseDeps:
    """Repositories and services shared by billing endpoints."""

    def __init__(
        self,
        projects: Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)],
        time_entries: Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)],
        billing_service: Annotated[BillingService, Depends(get_billing_service)],
        export_service: Annotated[ExportService, Depends(get_export_service)],
        cache: Annotated[EntityCache, Depends(get_entity_cache)]
    ):
        self.projects = projects
        self.time_entries = time_entries
        self.billing_service = billing_service
        self.export_service = export_service
        self.cache = cache

    def build(self, use_case_class, **kwargs):
        return use_case_class(
            self.projects,
            self.time_entries,
            billing_service=self.billing_service,
            export_service=self.export_service,
            cache=self.cache,
            **kwargs
        )


Deps = Annotated[BillingUseCaseDeps, Depends()]


@router.get("", response_model=BillingOverviewResponseDTO)
async def get_billing_overview(
    caller: AdminCaller,
    deps: Deps,
    search: Optional[str] = Query(None, max_length=255, description="Search by project name or client")
):
    """Projects waiting for an invoice, with their entries and totals at the project rate."""
    use_case = deps.build(GetBillingOverviewUseCase).set_caller(caller)
    return unwrap(await use_case.execute(search))


@router.get("/{project_id}", response_model=BillingBundleDTO)
async def get_billing_bundle(project_id: int, caller: AdminCaller, deps: Deps):
    use_case = deps.build(GetBillingBundleUseCase).set_caller(caller)
    return unwrap(await use_case.execute(project_id))


@router.get("/{project_id}/csv")
async def export_invoice_csv(project_id: int, caller: AdminCaller, deps: Deps):
    """Invoice CSV with a totals row, named factuur-<project>-<date>.csv."""
    use_case = deps.build(ExportBillingCsvUseCase).set_caller(caller)
    return csv_response(unwrap(await use_case.execute(project_id)))


@router.post("/{project_id}/send", response_model=InvoiceDispatchResponseDTO)
async def send_invoice(
    project_id: int,
    request: SendInvoiceRequestDTO,
    caller: AdminCaller,
    deps: Deps,
    dispatches: Annotated[SQLAlchemyInvoiceDispatchRepository, Depends(get_dispatch_repository)],
    gateway: Annotated[InvoiceGateway, Depends(get_invoice_gateway)],
    lifecycle_service: Annotated[LifecycleService, Depends(get_lifecycle_service)],
    idempotency_key: Annotated[Optional[str], Header(alias="Idempotency-Key", max_length=255)] = None
):
    """
    Send the invoice to a provider and mark the project completed.

    - **provider**: moneybird or twinfield
    - **idempotency_key**: Optional; the Idempotency-Key header works too.
      Retrying with the same key never sends a second invoice.
    """
    if idempotency_key and not request.idempotency_key:
        request = request.model_copy(update={"idempotency_key": idempotency_key})

    use_case = deps.build(
        SendInvoiceUseCase,
        invoice_gateway=gateway,
        dispatch_repository=dispatches,
        lifecycle_service=lifecycle_service
    ).set_caller(caller)
    return unwrap(await use_case.for_project(project_id).execute(request))
