import pytest

from context_service.domain.entities import PlanId, ViewerRole
from context_service.domain.plans import (
    FEATURE_BOARD_ADMIN_DELETE,
    FEATURE_RECOVERY_VAULT,
    FEATURE_SNAPSHOTS,
    FEATURE_VIEWERS,
    GB,
    MB,
    allowed_roles_for_plan,
    can_use_feature,
    caps_for_plan,
    normalise_plan_id,
    parse_plan_id,
    plan_from_sku,
    sku_for_plan,
)


def test_caps_per_plan():
    """Caps table matches the published tiers"""
    assert caps_for_plan(PlanId.free).as_dict() == {
        "max_boards": 3,
        "max_storage_bytes": 10 * MB,
        "max_viewers": 0,
    }
    assert caps_for_plan("plus").max_boards == 10
    assert caps_for_plan("plus").max_storage_bytes == 10 * GB
    assert caps_for_plan("premium").max_viewers == 20
    assert caps_for_plan("pro").max_storage_bytes == 80 * GB
    enterprise = caps_for_plan("enterprise")
    assert enterprise.max_boards is None
    assert enterprise.max_storage_bytes is None
    assert enterprise.max_viewers is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("ultra", PlanId.pro),
        ("basic", PlanId.plus),
        ("standard", PlanId.premium),
        (" PRO ", PlanId.pro),
        ("gold", PlanId.free),
        (None, PlanId.free),
        ("", PlanId.free),
    ],
)
def test_normalise_plan_id(value, expected):
    assert normalise_plan_id(value) == expected


def test_parse_plan_id_returns_none_for_unknown():
    assert parse_plan_id("gold") is None
    assert parse_plan_id({"sku": "x"}) is None
    assert parse_plan_id("ultra") == PlanId.pro


def test_unknown_plan_gets_free_caps():
    assert caps_for_plan("legacy-tier") == caps_for_plan(PlanId.free)


def test_allowed_roles():
    """Editor role only from premium upwards"""
    assert allowed_roles_for_plan("free") == {ViewerRole.viewer, ViewerRole.restricted}
    assert allowed_roles_for_plan("plus") == {ViewerRole.viewer, ViewerRole.restricted}
    assert ViewerRole.editor in allowed_roles_for_plan("premium")
    assert ViewerRole.editor in allowed_roles_for_plan("enterprise")


def test_feature_gates():
    assert not can_use_feature("free", FEATURE_VIEWERS)
    assert can_use_feature("plus", FEATURE_VIEWERS)
    assert not can_use_feature("premium", FEATURE_SNAPSHOTS)
    assert can_use_feature("pro", FEATURE_SNAPSHOTS)
    assert can_use_feature("ultra", FEATURE_RECOVERY_VAULT)
    assert can_use_feature("enterprise", FEATURE_BOARD_ADMIN_DELETE)
    assert not can_use_feature("plus", FEATURE_BOARD_ADMIN_DELETE)


def test_plan_from_sku_prefers_configured_ids():
    mapping = {"pro_monthly": "sku-123", "plus_annual": "sku-456"}
    assert plan_from_sku("sku-123", mapping) == PlanId.pro
    assert plan_from_sku("sku-456", mapping) == PlanId.plus
    assert plan_from_sku("premium_monthly", mapping) == PlanId.premium
    assert plan_from_sku("sku-999", mapping) is None
    assert plan_from_sku(None, mapping) is None


def test_sku_for_plan():
    mapping = {"pro_monthly": "sku-123", "enterprise_custom": "sku-ent"}
    assert sku_for_plan("pro", mapping) == "sku-123"
    assert sku_for_plan("pro", mapping, cycle="annual") is None
    assert sku_for_plan("enterprise", mapping) == "sku-ent"
    assert sku_for_plan("free", mapping) is None
