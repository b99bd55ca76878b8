from datetime import datetime

import pytest

from reminder_service.core.errors import ValidationError
from reminder_service.schemas import ReminderRead, validate_reminder_payload

VALID = {
    "description": "Call back",
    "datetime": "2024-03-01 10:00:00",
    "is_done": 0,
    "customer_id": 5,
    "account_id": 1,
}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(1, True), ("1", True), (True, True), (0, False), ("0", False), (False, False)],
)
def test_is_done_is_normalized_to_boolean(raw, expected) -> None:
    payload = validate_reminder_payload({**VALID, "is_done": raw})

    assert payload.is_done is expected


def test_valid_payload_is_normalized() -> None:
    payload = validate_reminder_payload(VALID)

    assert payload.datetime == datetime(2024, 3, 1, 10, 0, 0)
    assert payload.customer_id == 5
    assert payload.id is None


def test_customer_id_may_be_null_or_omitted() -> None:
    assert validate_reminder_payload({**VALID, "customer_id": None}).customer_id is None
    without_customer = {key: value for key, value in VALID.items() if key != "customer_id"}
    assert validate_reminder_payload(without_customer).customer_id is None


def test_missing_required_fields_are_all_reported() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload({"account_id": 1})

    paths = sorted(detail.path for detail in exc_info.value.details)
    assert paths == ["datetime", "description", "is_done"]
    assert exc_info.value.client_error
    assert exc_info.value.status_code == 400


def test_invalid_fields_are_all_reported() -> None:
    payload = {
        "description": "",
        "datetime": "2024-03-01T10:00:00",
        "is_done": "yes",
        "customer_id": 0,
        "account_id": 1,
    }
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload(payload)

    paths = sorted(detail.path for detail in exc_info.value.details)
    assert paths == ["customer_id", "datetime", "description", "is_done"]


@pytest.mark.parametrize("customer_id", [0, -1, 1_000_001])
def test_customer_id_out_of_range_is_rejected(customer_id) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload({**VALID, "customer_id": customer_id})

    (detail,) = exc_info.value.details
    assert detail.path == "customer_id"
    assert detail.message == "must be between 1 and 1000000"


def test_configured_maximum_applies_to_ids() -> None:
    with pytest.raises(ValidationError):
        validate_reminder_payload({**VALID, "customer_id": 11}, max_id=10)


def test_description_length_is_bounded() -> None:
    validate_reminder_payload({**VALID, "description": "x" * 2047})
    with pytest.raises(ValidationError):
        validate_reminder_payload({**VALID, "description": "x" * 2048})


def test_account_id_is_required() -> None:
    payload = {key: value for key, value in VALID.items() if key != "account_id"}
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload(payload)

    assert [detail.path for detail in exc_info.value.details] == ["account_id"]


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload({**VALID, "is_deleted": 1})

    assert [detail.path for detail in exc_info.value.details] == ["is_deleted"]


def test_read_projection_hides_missing_customer_and_formats_datetime() -> None:
    reminder = ReminderRead(
        id=3,
        description="Call back",
        customer_id=None,
        datetime=datetime(2024, 3, 1, 10, 0, 0),
        is_done=False,
    )

    assert reminder.model_dump(mode="json") == {
        "id": 3,
        "description": "Call back",
        "customer_id": None,
        "datetime": "2024-03-01 10:00:00",
        "is_done": False,
    }


@pytest.mark.parametrize("field", ["id", "customer_id", "account_id"])
@pytest.mark.parametrize("value", [True, False])
def test_boolean_ids_are_rejected(field, value) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_reminder_payload({**VALID, field: value})

    (detail,) = exc_info.value.details
    assert detail.path == field
    assert detail.message == "must be a positive integer"


def test_numeric_string_ids_are_accepted() -> None:
    payload = validate_reminder_payload({**VALID, "customer_id": "5", "id": "12"})

    assert payload.customer_id == 5
    assert payload.id == 12
