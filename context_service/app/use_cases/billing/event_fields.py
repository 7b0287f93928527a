"""
Field extraction for monday.com marketplace webhook payloads.

Payload shapes differ between event versions, so each field is read through
an ordered list of candidate paths and the first non-empty scalar wins.
"""

from typing import Any, Iterable, Optional, Sequence, Tuple

Path = Tuple[str, ...]

CONTAINER_PATHS: Sequence[Path] = ((), ("data",), ("event",), ("data", "subscription"), ("subscription",))

ACCOUNT_ID_PATHS: Sequence[Path] = (
    ("account_id",),
    ("accountId",),
    ("account", "id"),
    ("account", "account_id"),
    ("account", "accountId"),
)
SKU_PATHS: Sequence[Path] = (("sku",), ("plan", "sku"), ("planSku",), ("billing", "sku"))
PLAN_PATHS: Sequence[Path] = (("plan",), ("plan_id",), ("planId",), ("plan_type",))
EVENT_TYPE_PATHS: Sequence[Path] = (("type",), ("event",), ("event_type",))
BOARD_ID_PATHS: Sequence[Path] = (("board_id",), ("boardId",), ("board", "id"))

ACTIVATING_EVENTS = frozenset(
    {
        "purchased",
        "upgraded",
        "renewed",
        "downgraded",
        "app_subscription_created",
        "app_subscription_changed",
        "app_subscription_renewed",
        "app_subscription_cancellation_revoked_by_user",
    }
)
CANCELING_EVENTS = frozenset({"canceled", "cancelled", "app_subscription_cancelled"})
BOARD_DELETED_EVENTS = frozenset({"board_deleted"})


def _dig(payload: Any, path: Path) -> Any:
    value = payload
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _is_present(value: Any) -> bool:
    if value is None or isinstance(value, (dict, list, bool)):
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def first_value(payload: Any, paths: Iterable[Path]) -> Optional[Any]:
    """First non-empty scalar found under any container, trying paths in order"""
    paths = list(paths)
    for container_path in CONTAINER_PATHS:
        container = _dig(payload, container_path)
        if not isinstance(container, dict):
            continue
        for path in paths:
            value = _dig(container, path)
            if _is_present(value):
                return value.strip() if isinstance(value, str) else value
    return None


def event_type(payload: Any) -> str:
    value = first_value(payload, EVENT_TYPE_PATHS)
    return str(value).strip().lower() if value is not None else ""
