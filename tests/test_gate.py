"""InputGate: single outstanding request, confirm / cancel, late resolutions."""
import pytest

from engine import InputGate, NumberField, ProtocolError


def test_confirm_resolves_request_and_closes_gate(gate):
    request = gate.open(NumberField())
    assert gate.is_open
    assert request.pending
    assert gate.confirm("5") is True
    assert not gate.is_open
    assert not request.pending
    assert request.value == 5
    assert not request.cancelled


def test_cancel_resolves_without_value(gate):
    request = gate.open()
    assert gate.cancel() is True
    assert request.cancelled
    assert request.value is None


def test_second_request_while_outstanding_is_a_protocol_error(gate):
    gate.open()
    with pytest.raises(ProtocolError):
        gate.open()


def test_reading_value_before_resolution_is_a_protocol_error(gate):
    request = gate.open()
    with pytest.raises(ProtocolError):
        request.value


def test_done_callback_fires_once_on_resolution(gate):
    request = gate.open()
    seen = []
    request.add_done_callback(lambda r: seen.append(r.value))
    gate.confirm(7)
    assert seen == [7]
    # a second resolution of the same request is ignored
    assert request.confirm(8) is False
    assert request.cancel() is False
    assert seen == [7]


def test_resolution_without_request_is_ignored(gate):
    assert gate.confirm("3") is False
    assert gate.cancel() is False


def test_malformed_value_keeps_request_open(gate):
    request = gate.open()
    with pytest.raises(ValueError):
        gate.confirm("abc")
    with pytest.raises(ValueError):
        gate.confirm("")
    assert gate.is_open
    assert request.pending
    gate.confirm("12")
    assert request.value == 12


def test_discard_forgets_request_without_resolving(gate):
    request = gate.open()
    assert gate.discard() is request
    assert not gate.is_open
    assert request.pending
    assert gate.discard() is None


@pytest.mark.parametrize("raw, expected", [
    ("42", 42),
    (" 7 ", 7),
    ("2.5", 2.5),
    ("-3", -3),
    (9, 9),
    ("1e2", 100),
])
def test_number_field_parse(raw, expected):
    value = NumberField().parse(raw)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("raw", [None, "", "abc", "nan", "inf", True])
def test_number_field_rejects(raw):
    with pytest.raises(ValueError):
        NumberField().parse(raw)


def test_number_field_range_is_cosmetic():
    field = NumberField(min=0, max=999, step=1)
    assert field.parse("5000") == 5000
    assert field.to_dict() == {"name": "number", "label": "Number", "min": 0, "max": 999, "step": 1}


def test_callback_exception_reaches_resolver(gate):
    def explode(request):
        raise RuntimeError(f"got {request.value}")

    gate.open().add_done_callback(explode)
    with pytest.raises(RuntimeError, match="got 4"):
        gate.confirm("4")
    assert not gate.is_open


def test_callback_added_after_resolution_runs_immediately(gate):
    request = gate.open()
    gate.cancel()
    seen = []
    request.add_done_callback(lambda r: seen.append(r.cancelled))
    assert seen == [True]
