"""
Plan Catalog

Static mapping from plan to caps, viewer roles and gated features.
All functions are pure; unknown plans fall back to the free tier.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional

from .entities.enums import PlanId, ViewerRole

logger = logging.getLogger(__name__)

MB = 1024 * 1024
GB = 1024 * MB


@dataclass(frozen=True)
class PlanCaps:
    """Capability limits of a plan; None means unlimited"""

    max_boards: Optional[int]
    max_storage_bytes: Optional[int]
    max_viewers: Optional[int]

    def as_dict(self) -> dict:
        return {
            "max_boards": self.max_boards,
            "max_storage_bytes": self.max_storage_bytes,
            "max_viewers": self.max_viewers,
        }


CAPS_BY_PLAN: Dict[PlanId, PlanCaps] = {
    PlanId.free: PlanCaps(max_boards=3, max_storage_bytes=10 * MB, max_viewers=0),
    PlanId.plus: PlanCaps(max_boards=10, max_storage_bytes=10 * GB, max_viewers=5),
    PlanId.premium: PlanCaps(max_boards=30, max_storage_bytes=25 * GB, max_viewers=20),
    PlanId.pro: PlanCaps(max_boards=100, max_storage_bytes=80 * GB, max_viewers=50),
    PlanId.enterprise: PlanCaps(max_boards=None, max_storage_bytes=None, max_viewers=None),
}

# Legacy and marketplace spellings. Renames are a one-line change here.
PLAN_ALIASES: Dict[str, PlanId] = {
    "ultra": PlanId.pro,
    "basic": PlanId.plus,
    "standard": PlanId.premium,
}

BASIC_ROLES: FrozenSet[ViewerRole] = frozenset({ViewerRole.viewer, ViewerRole.restricted})
EDITOR_ROLES: FrozenSet[ViewerRole] = BASIC_ROLES | {ViewerRole.editor}

ROLES_BY_PLAN: Dict[PlanId, FrozenSet[ViewerRole]] = {
    PlanId.free: BASIC_ROLES,
    PlanId.plus: BASIC_ROLES,
    PlanId.premium: EDITOR_ROLES,
    PlanId.pro: EDITOR_ROLES,
    PlanId.enterprise: EDITOR_ROLES,
}

FEATURE_VIEWERS = "viewers"
FEATURE_SNAPSHOTS = "snapshots"
FEATURE_RECOVERY_VAULT = "recovery_vault"
FEATURE_BOARD_ADMIN_DELETE = "board_admin_delete"

FEATURES_BY_PLAN: Dict[str, FrozenSet[PlanId]] = {
    FEATURE_VIEWERS: frozenset({PlanId.plus, PlanId.premium, PlanId.pro, PlanId.enterprise}),
    FEATURE_SNAPSHOTS: frozenset({PlanId.pro, PlanId.enterprise}),
    FEATURE_RECOVERY_VAULT: frozenset({PlanId.pro, PlanId.enterprise}),
    FEATURE_BOARD_ADMIN_DELETE: frozenset({PlanId.pro, PlanId.enterprise}),
}

# Marketplace SKU keys; MONDAY_PLAN_SKUS maps these keys to the real SKU ids
PLAN_SKU_KEYS: Dict[str, PlanId] = {
    "free": PlanId.free,
    "plus_monthly": PlanId.plus,
    "plus_annual": PlanId.plus,
    "premium_monthly": PlanId.premium,
    "premium_annual": PlanId.premium,
    "pro_monthly": PlanId.pro,
    "pro_annual": PlanId.pro,
    "enterprise_custom": PlanId.enterprise,
}


def parse_plan_id(value) -> Optional[PlanId]:
    """Map a loosely typed plan string onto PlanId, None when unrecognised"""
    if isinstance(value, PlanId):
        return value
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip().lower()
    if text in PLAN_ALIASES:
        return PLAN_ALIASES[text]
    try:
        return PlanId(text)
    except ValueError:
        return None


def normalise_plan_id(value) -> PlanId:
    """Like parse_plan_id, defaulting to free"""
    return parse_plan_id(value) or PlanId.free


def caps_for_plan(plan) -> PlanCaps:
    return CAPS_BY_PLAN[normalise_plan_id(plan)]


def allowed_roles_for_plan(plan) -> FrozenSet[ViewerRole]:
    return ROLES_BY_PLAN[normalise_plan_id(plan)]


def can_use_feature(plan, feature: str) -> bool:
    plans = FEATURES_BY_PLAN.get(feature)
    if plans is None:
        return True
    return normalise_plan_id(plan) in plans


def plan_from_sku(sku: Optional[str], sku_mapping: Optional[Mapping[str, str]] = None) -> Optional[PlanId]:
    """
    Resolve a marketplace SKU to a plan.

    ``sku_mapping`` is the configured {sku key: marketplace sku id} table.
    A SKU matching a configured id wins; a SKU that is itself a known key is
    accepted as well. Returns None when nothing matches.
    """
    if not sku:
        return None
    sku = str(sku).strip()
    for key, configured in (sku_mapping or {}).items():
        if configured and str(configured).strip() == sku and key in PLAN_SKU_KEYS:
            return PLAN_SKU_KEYS[key]
    lowered = sku.lower()
    if lowered in PLAN_SKU_KEYS:
        return PLAN_SKU_KEYS[lowered]
    logger.warning("Unknown marketplace SKU: %s", sku)
    return None


def sku_for_plan(plan, sku_mapping: Optional[Mapping[str, str]] = None, cycle: str = "monthly") -> Optional[str]:
    """Marketplace SKU id used for checkout, None when not configured"""
    plan_id = normalise_plan_id(plan)
    if plan_id == PlanId.free:
        return None
    key = "enterprise_custom" if plan_id == PlanId.enterprise else f"{plan_id.value}_{cycle}"
    return (sku_mapping or {}).get(key)
