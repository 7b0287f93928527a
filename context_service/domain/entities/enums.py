"""
Context Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class PlanId(str, Enum):
    """Subscription tier"""

    free = "free"
    plus = "plus"
    premium = "premium"
    pro = "pro"
    enterprise = "enterprise"


class BillingStatus(str, Enum):
    """Marketplace subscription status"""

    active = "active"
    pending = "pending"
    canceled = "canceled"


class ViewerStatus(str, Enum):
    """Stored per-board viewer status ("allowed" is the stored form of role viewer)"""

    allowed = "allowed"
    restricted = "restricted"
    editor = "editor"


class ViewerRole(str, Enum):
    """Viewer role as exposed to clients"""

    viewer = "viewer"
    restricted = "restricted"
    editor = "editor"


class LimitKind(str, Enum):
    """Plan cap or feature that a LimitError refers to"""

    boards = "boards"
    storage = "storage"
    viewers = "viewers"
    snapshots = "snapshots"
    recovery_vault = "recovery_vault"
