"""
Viewer role model.

The effective access of a user on a board is decided from three facts: the
stored status (allowed/restricted/editor, or no row yet) and two live facts
from monday.com (account admin, board owner). The decision table below keeps
the rule "admins and owners always get full access" in one place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .entities.enums import ViewerRole, ViewerStatus


class AccessLevel(str, Enum):
    """Effective access after merging stored and live facts"""

    none = "none"
    viewer = "viewer"
    editor = "editor"


@dataclass(frozen=True)
class RoleFacts:
    """Live role facts for one user on one board"""

    is_admin: bool = False
    is_owner: bool = False

    @property
    def is_privileged(self) -> bool:
        return self.is_admin or self.is_owner


NON_PRIVILEGED = RoleFacts()

_STORED_ACCESS: Dict[Optional[ViewerStatus], AccessLevel] = {
    None: AccessLevel.none,
    ViewerStatus.restricted: AccessLevel.none,
    ViewerStatus.allowed: AccessLevel.viewer,
    ViewerStatus.editor: AccessLevel.editor,
}

# (stored status, is_admin, is_owner) -> effective access
ACCESS_TABLE: Dict[Tuple[Optional[ViewerStatus], bool, bool], AccessLevel] = {
    (stored, is_admin, is_owner): (
        AccessLevel.editor if (is_admin or is_owner) else access
    )
    for stored, access in _STORED_ACCESS.items()
    for is_admin in (False, True)
    for is_owner in (False, True)
}


def effective_access(stored: Optional[ViewerStatus], facts: RoleFacts) -> AccessLevel:
    return ACCESS_TABLE[(stored, facts.is_admin, facts.is_owner)]


def to_stored_status(role: ViewerRole) -> ViewerStatus:
    if role == ViewerRole.viewer:
        return ViewerStatus.allowed
    return ViewerStatus(role.value)


def from_stored_status(status) -> ViewerRole:
    value = getattr(status, "value", status)
    if value == ViewerStatus.editor.value:
        return ViewerRole.editor
    if value == ViewerStatus.restricted.value:
        return ViewerRole.restricted
    return ViewerRole.viewer


_ROLE_INPUTS: Dict[str, ViewerRole] = {
    "viewer": ViewerRole.viewer,
    "viewers": ViewerRole.viewer,
    "allowed": ViewerRole.viewer,
    "restricted": ViewerRole.restricted,
    "editor": ViewerRole.editor,
    "editors": ViewerRole.editor,
}


def normalise_role_input(value) -> Optional[ViewerRole]:
    if not isinstance(value, str):
        return None
    return _ROLE_INPUTS.get(value.strip().lower())


def counts_against_cap(status) -> bool:
    """Non-restricted rows count towards the viewer cap"""
    return getattr(status, "value", status) in (
        ViewerStatus.allowed.value,
        ViewerStatus.editor.value,
    )
