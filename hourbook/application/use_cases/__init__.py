"""
Application layer use cases.
Business logic for time tracking, the project board and billing.
"""

from .base_use_case import *
from .user_use_cases import *
from .auth_use_cases import *
from .project_use_cases import *
from .time_entry_use_cases import *
from .billing_use_cases import *

__all__ = [
    # Base Use Cases
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "CreateUseCase",
    "UpdateUseCase",
    "DeleteUseCase",
    "AuthorizedUseCase",
    "UseCaseResult",

    # User Use Cases
    "EnsureProfileUseCase",
    "GetCurrentUserUseCase",
    "UpdateProfileNameUseCase",
    "UpdateHourlyRateUseCase",
    "ListUsersUseCase",

    # Auth Use Cases
    "SignUpUseCase",
    "SignInUseCase",
    "SignOutUseCase",
    "UpdatePasswordUseCase",

    # Project Use Cases
    "GetProjectBoardUseCase",
    "GetProjectDetailUseCase",
    "CreateProjectUseCase",
    "UpdateProjectUseCase",
    "ChangeProjectStatusUseCase",
    "DeleteProjectUseCase",

    # Time Entry Use Cases
    "LogTimeEntryUseCase",
    "DeleteTimeEntryUseCase",
    "GetTimeTrackingUseCase",
    "ExportTimeTrackingCsvUseCase",

    # Billing Use Cases
    "GetBillingOverviewUseCase",
    "GetBillingBundleUseCase",
    "ExportBillingCsvUseCase",
    "SendInvoiceUseCase",
]
