"""
Access policy.
One capability check for role and ownership, applied to every view and mutation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from hourbook.domain.models.base import AuthorizationError
from hourbook.domain.models.project import Project
from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.models.user import UserRole


class View(str, Enum):
    """Screens with their own visibility rules."""
    BOARD = "board"
    TIME_TRACKING = "time_tracking"
    BILLING = "billing"
    USER_DIRECTORY = "user_directory"
    PROFILE = "profile"


@dataclass(frozen=True)
class Caller:
    """Authenticated identity making the request."""

    user_id: str
    role: Optional[str]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


@dataclass(frozen=True)
class Permissions:
    read: bool = False
    write: bool = False


NO_ACCESS = Permissions()


def capabilities(
    caller_id: Optional[str],
    caller_role: Optional[str],
    owner_id: Optional[str],
    view: View
) -> Permissions:
    """
    Resolve read/write permissions of a caller on a resource in a view.
    Anything not explicitly allowed is denied.
    """
    if not caller_id:
        return NO_ACCESS

    role = caller_role.value if isinstance(caller_role, UserRole) else caller_role
    if role not in (UserRole.ADMIN.value, UserRole.EMPLOYEE.value):
        return NO_ACCESS

    is_admin = role == UserRole.ADMIN.value
    is_owner = owner_id is not None and owner_id == caller_id

    if view == View.BOARD:
        return Permissions(read=True, write=is_admin or is_owner)

    if view == View.TIME_TRACKING:
        allowed = is_admin or is_owner
        return Permissions(read=allowed, write=allowed)

    if view == View.BILLING:
        return Permissions(read=is_admin, write=is_admin)

    if view == View.USER_DIRECTORY:
        return Permissions(read=is_admin, write=False)

    if view == View.PROFILE:
        return Permissions(read=is_owner, write=is_owner)

    return NO_ACCESS


def caller_capabilities(caller: Optional[Caller], owner_id: Optional[str], view: View) -> Permissions:
    if caller is None:
        return NO_ACCESS
    return capabilities(caller.user_id, caller.role, owner_id, view)


def require(
    caller: Optional[Caller],
    owner_id: Optional[str],
    view: View,
    write: bool = False
) -> None:
    """Raise AuthorizationError unless the caller holds the permission."""
    permissions = caller_capabilities(caller, owner_id, view)
    allowed = permissions.write if write else permissions.read
    if allowed:
        return

    if caller is None:
        raise AuthorizationError("Authenticatie vereist", redirect_to="/auth/login")
    if view == View.BILLING:
        raise AuthorizationError("Deze pagina is alleen toegankelijk voor beheerders.")
    raise AuthorizationError("Je hebt geen rechten voor deze actie.")


def can_edit_project(caller: Optional[Caller], project: Project) -> bool:
    return caller_capabilities(caller, project.created_by, View.BOARD).write


def scope_time_entries(caller: Optional[Caller], entries: Iterable[TimeEntry]) -> List[TimeEntry]:
    """Time-tracking rows the caller may see: all for admins, own entries otherwise."""
    return [
        entry for entry in entries
        if caller_capabilities(caller, entry.user_id, View.TIME_TRACKING).read
    ]


def scope_projects_for_tracking(caller: Optional[Caller], projects: Iterable[Project]) -> List[Project]:
    """Projects offered in the time-tracking filter: all for admins, own creations otherwise."""
    return [
        project for project in projects
        if caller_capabilities(caller, project.created_by, View.TIME_TRACKING).read
    ]
