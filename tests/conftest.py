"""
Shared fixtures. Settings are read at import time, so the environment is set first.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["INVOICE_SEND_DELAY_SECONDS"] = "0"

import pytest

from hourbook.domain.events.base import get_event_dispatcher
from hourbook.domain.services.access_policy import Caller
from fakes import Workspace


@pytest.fixture(autouse=True)
def clean_event_log():
    dispatcher = get_event_dispatcher()
    dispatcher.clear_event_log()
    yield
    dispatcher.clear_event_log()


@pytest.fixture
def workspace():
    return Workspace()


@pytest.fixture
def admin():
    return Caller(user_id=Workspace.ADMIN_ID, role="admin")


@pytest.fixture
def employee():
    return Caller(user_id=Workspace.EMPLOYEE_ID, role="employee")
