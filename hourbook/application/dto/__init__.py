"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import *
from .user_dto import *
from .project_dto import *
from .time_entry_dto import *
from .billing_dto import *

__all__ = [
    # Base DTOs
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "CreateRequestDTO",
    "UpdateRequestDTO",
    "MessageResponseDTO",
    "HealthCheckResponseDTO",
    "ErrorResponseDTO",

    # User DTOs
    "SignUpRequestDTO",
    "SignInRequestDTO",
    "UpdatePasswordRequestDTO",
    "UpdateProfileNameRequestDTO",
    "UpdateHourlyRateRequestDTO",
    "UserResponseDTO",
    "SignUpResponseDTO",
    "SessionResponseDTO",

    # Project DTOs
    "CreateProjectRequestDTO",
    "UpdateProjectRequestDTO",
    "UpdateProjectStatusRequestDTO",
    "ProjectResponseDTO",
    "BoardColumnDTO",
    "ProjectBoardResponseDTO",
    "ProjectDetailResponseDTO",
    "ProjectDeletedResponseDTO",

    # Time entry DTOs
    "CreateTimeEntryRequestDTO",
    "TimeEntryResponseDTO",
    "TimeTrackingFilterDTO",
    "UserOptionDTO",
    "ProjectOptionDTO",
    "TimeTrackingResponseDTO",
    "TimeEntryDeletedResponseDTO",

    # Billing DTOs
    "BillingEntryDTO",
    "BillingProjectDTO",
    "BillingBundleDTO",
    "BillingOverviewResponseDTO",
    "SendInvoiceRequestDTO",
    "InvoiceDispatchResponseDTO",
    "CsvExportDTO",
]
