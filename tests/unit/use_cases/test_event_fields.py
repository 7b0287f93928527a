from context_service.app.use_cases.billing.event_fields import (
    ACCOUNT_ID_PATHS,
    PLAN_PATHS,
    SKU_PATHS,
    event_type,
    first_value,
)


def test_top_level_fields_win():
    payload = {"account_id": 1, "data": {"account_id": 2}}

    assert first_value(payload, ACCOUNT_ID_PATHS) == 1


def test_nested_containers_are_searched():
    payload = {"type": "Purchased", "data": {"subscription": {"plan_id": "pro", "sku": " pro_monthly "}}}

    assert event_type(payload) == "purchased"
    assert first_value(payload, PLAN_PATHS) == "pro"
    assert first_value(payload, SKU_PATHS) == "pro_monthly"


def test_account_object_and_non_scalars():
    payload = {"data": {"plan": {"sku": "plus_annual"}, "account": {"id": 12345}}}

    assert first_value(payload, ACCOUNT_ID_PATHS) == 12345
    assert first_value(payload, PLAN_PATHS) is None
    assert first_value(payload, SKU_PATHS) == "plus_annual"


def test_blank_and_boolean_values_are_skipped():
    payload = {"account_id": "  ", "accountId": True, "event": {"account_id": "777"}}

    assert first_value(payload, ACCOUNT_ID_PATHS) == "777"


def test_missing_fields():
    assert first_value({}, ACCOUNT_ID_PATHS) is None
    assert first_value("not a dict", ACCOUNT_ID_PATHS) is None
    assert event_type({"data": {}}) == ""
