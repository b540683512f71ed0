import pytest

from app.core.exceptions import InvalidTransitionError, RecordValidationError
from app.services.pin_reset import PinResetFlow, ResetStep, is_valid_pin, validate_pin


class FakeDirectory:
    def __init__(self, *known_ids: str):
        self.pins = {staff_id: "1234" for staff_id in known_ids}
        self.calls = 0

    def reset(self, staff_id: str, new_pin: str) -> bool:
        self.calls += 1
        if staff_id not in self.pins:
            return False
        self.pins[staff_id] = new_pin
        return True


@pytest.mark.parametrize("pin, valid", [("0000", True), ("1234", True), ("123", False), ("12a4", False), ("12345", False), ("", False)])
def test_is_valid_pin(pin: str, valid: bool) -> None:
    assert is_valid_pin(pin) is valid


def test_validate_pin_raises() -> None:
    with pytest.raises(RecordValidationError) as exc:
        validate_pin("12")
    assert exc.value.message == "PIN must be 4 digits."


def test_reset_returns_to_login_with_id_filled_in() -> None:
    directory = FakeDirectory("12345")
    flow = PinResetFlow()

    assert flow.submit_id("12345") == ResetStep.ENTERING_NEW_PIN
    assert flow.submit_pin("4321", directory.reset) == ResetStep.LOGIN

    assert directory.pins["12345"] == "4321"
    assert flow.prefilled_id == "12345"
    assert flow.message == "PIN updated successfully. Please login."


def test_invalid_pin_keeps_step_and_skips_reset() -> None:
    directory = FakeDirectory("12345")
    flow = PinResetFlow()
    flow.submit_id("12345")

    assert flow.submit_pin("12a4", directory.reset) == ResetStep.ENTERING_NEW_PIN
    assert flow.message == "PIN must be 4 digits."
    assert directory.calls == 0


def test_unknown_id_goes_back_to_id_entry() -> None:
    flow = PinResetFlow()
    flow.submit_id("nobody")

    assert flow.submit_pin("4321", FakeDirectory().reset) == ResetStep.ENTERING_ID
    assert flow.message == "Staff ID not found."
    assert flow.prefilled_id is None


def test_blank_id_is_refused() -> None:
    flow = PinResetFlow()
    assert flow.submit_id("   ") == ResetStep.ENTERING_ID
    assert flow.message == "Enter your Staff ID."


def test_pin_before_id_is_an_invalid_transition() -> None:
    with pytest.raises(InvalidTransitionError):
        PinResetFlow().submit_pin("4321", FakeDirectory().reset)

