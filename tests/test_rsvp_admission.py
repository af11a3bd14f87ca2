# tests/test_rsvp_admission.py

import json

import pytest

from app.config import Settings
from app.core.errors import (
    DuplicateSubmission,
    InvalidGuestCount,
    InvalidPhone,
    MissingFields,
    NotOnGuestList,
)
from app.crud import rsvps_crud
from app.schemas import RSVPSubmission
from conftest import FIXED_NOW


def _submission(**overrides) -> RSVPSubmission:
    data = {
        "names": "John Smith",
        "phone": "(555) 123-4567",
        "attending": "yes",
        "guests": 2,
    }
    data.update(overrides)
    return RSVPSubmission(**data)


# =======================
# Saneamiento y campos
# =======================
def test_sanitize_strips_dangerous_chars_and_truncates():
    assert rsvps_crud.sanitize_input('  <b>"Hi" it\'s me</b>  ') == "bHi its me/b"
    assert len(rsvps_crud.sanitize_input("x" * 900)) == 500
    assert rsvps_crud.sanitize_input(None) is None


@pytest.mark.parametrize("phone, ok", [
    ("555-1234", False),
    ("(555) 123-4567", True),
    ("1 (555) 123-4567", True),
    ("+44 20 7946 09581", False),
    ("", False),
])
def test_phone_validation(phone, ok):
    assert rsvps_crud.is_valid_phone(phone) is ok


@pytest.mark.parametrize("value", [0, 9, -1, None, True, "abc", "2.5", 2.5, "", [2]])
def test_parse_guest_count_rejects(value):
    with pytest.raises(InvalidGuestCount):
        rsvps_crud.parse_guest_count(value)


@pytest.mark.parametrize("value, expected", [(1, 1), (8, 8), ("3", 3), (" 4 ", 4), (5.0, 5)])
def test_parse_guest_count_accepts(value, expected):
    assert rsvps_crud.parse_guest_count(value) == expected


# =======================
# Admisión (función pura)
# =======================
def test_admit_builds_record_and_returns_new_ledger():
    settings = Settings()
    ledger = []
    new_ledger, record = rsvps_crud.admit(
        ledger, [], _submission(dietary="<no nuts>", message="See you!"),
        settings=settings, ip_address="10.0.0.1", now=FIXED_NOW,
    )
    assert ledger == []
    assert new_ledger == [record]
    assert record.names == "John Smith"
    assert record.phone == "(555) 123-4567"
    assert record.attending == "yes"
    assert record.guests == 2
    assert record.dietary == "no nuts"
    assert record.message == "See you!"
    assert record.timestamp == FIXED_NOW
    assert record.ip_address == "10.0.0.1"
    assert record.id.startswith(str(int(FIXED_NOW.timestamp() * 1000)))


def test_admit_not_attending_drops_guest_count():
    _, record = rsvps_crud.admit(
        [], [], _submission(attending="no", guests=99), settings=Settings(), now=FIXED_NOW,
    )
    assert record.attending == "no"
    assert record.guests is None
    assert record.ip_address == "unknown"
    assert "guests" not in record.to_json_dict()


@pytest.mark.parametrize("field", ["names", "phone", "attending"])
@pytest.mark.parametrize("blank", [None, "", "   "])
def test_admit_requires_fields(field, blank):
    with pytest.raises(MissingFields):
        rsvps_crud.admit([], [], _submission(**{field: blank}), settings=Settings())


def test_admit_names_that_sanitize_to_nothing_are_missing():
    with pytest.raises(MissingFields):
        rsvps_crud.admit([], [], _submission(names="<<>>"), settings=Settings())


@pytest.mark.parametrize("guests", [0, 9, None])
def test_admit_rejects_invalid_guest_count(guests):
    with pytest.raises(InvalidGuestCount):
        rsvps_crud.admit([], [], _submission(guests=guests), settings=Settings())


def test_validation_order_missing_fields_before_guest_count():
    with pytest.raises(MissingFields):
        rsvps_crud.admit([], [], _submission(phone="", guests=0), settings=Settings())


def test_validation_order_guest_count_before_phone():
    with pytest.raises(InvalidGuestCount):
        rsvps_crud.admit([], [], _submission(phone="555-1234", guests=9), settings=Settings())


def test_admit_rejects_short_phone():
    with pytest.raises(InvalidPhone):
        rsvps_crud.admit([], [], _submission(phone="555-1234"), settings=Settings())


def test_admit_checks_guest_list():
    guest_list = ["John Smith", "Jane Doe"]
    with pytest.raises(NotOnGuestList):
        rsvps_crud.admit([], guest_list, _submission(names="Alice Wonder"), settings=Settings())
    _, record = rsvps_crud.admit([], guest_list, _submission(names="Jon Smith"), settings=Settings())
    assert record.names == "Jon Smith"


def test_admit_rejects_duplicate_case_insensitive_name_same_phone():
    ledger, _ = rsvps_crud.admit([], [], _submission(), settings=Settings())
    with pytest.raises(DuplicateSubmission):
        rsvps_crud.admit(ledger, [], _submission(names="JOHN SMITH"), settings=Settings())


def test_admit_same_name_different_phone_is_not_duplicate():
    ledger, _ = rsvps_crud.admit([], [], _submission(), settings=Settings())
    ledger, _ = rsvps_crud.admit(ledger, [], _submission(phone="555 987 6543"), settings=Settings())
    assert len(ledger) == 2


def test_admit_retries_id_on_collision():
    ledger, first = rsvps_crud.admit([], [], _submission(), settings=Settings(), now=FIXED_NOW)
    calls = []

    def factory(now, is_unique):
        candidates = [first.id, "fresh-id"]
        for c in candidates:
            calls.append(c)
            if is_unique(c):
                return c
        raise AssertionError("no unique id")

    _, second = rsvps_crud.admit(
        ledger, [], _submission(names="Jane Doe"), settings=Settings(), id_factory=factory,
    )
    assert second.id == "fresh-id"
    assert calls == [first.id, "fresh-id"]


# =======================
# Motor con almacenamiento
# =======================
def test_engine_submit_persists_ledger(engine, settings):
    record = engine.submit_rsvp(_submission(), ip_address="127.0.0.1")
    on_disk = json.loads((settings.data_dir / settings.ledger_file).read_text("utf-8"))
    assert [r["id"] for r in on_disk] == [record.id]
    assert on_disk[0]["ipAddress"] == "127.0.0.1"
    assert on_disk[0]["timestamp"].startswith("2026-06-20T18:30:00")


def test_engine_duplicate_leaves_ledger_unchanged(engine):
    engine.submit_rsvp(_submission())
    with pytest.raises(DuplicateSubmission):
        engine.submit_rsvp(_submission(names="john smith"))
    assert len(engine.load_rsvps()) == 1


def test_engine_rejection_does_not_create_files(engine, settings):
    with pytest.raises(InvalidPhone):
        engine.submit_rsvp(_submission(phone="555-1234"))
    assert not (settings.data_dir / settings.ledger_file).exists()


def test_engine_uses_guest_list_file(engine, write_guests):
    write_guests(["Jane Doe"])
    with pytest.raises(NotOnGuestList):
        engine.submit_rsvp(_submission())
    assert engine.submit_rsvp(_submission(names="jane doe")).names == "jane doe"
