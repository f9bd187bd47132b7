from datetime import date, time, timedelta

import pytest

from daygrid.domain import Event, EventCategory, EventDraft, ValidationError, parse_time


def test_to_record_uses_wire_format(make_event):
    event = make_event(event_id=42, description="daily sync", category=EventCategory.WORK)

    assert event.to_record() == {
        "id": 42,
        "name": "Standup",
        "date": "2024-06-10",
        "startTime": "09:00",
        "endTime": "09:30",
        "description": "daily sync",
        "category": "work",
    }


def test_from_record_restores_event(make_event):
    record = make_event(event_id=7, category=EventCategory.PERSONAL).to_record()

    assert Event.from_record(record) == make_event(event_id=7, category=EventCategory.PERSONAL)


def test_from_record_tolerates_seconds_and_missing_optional_fields():
    event = Event.from_record(
        {"id": 1, "name": "Gym", "date": "2024-06-11", "startTime": "18:00:00", "endTime": "19:15"}
    )

    assert event.start_time == time(18, 0)
    assert event.description == ""
    assert event.category is EventCategory.DEFAULT


def test_from_record_missing_field_is_a_validation_error():
    with pytest.raises(ValidationError, match="startTime"):
        Event.from_record({"id": 1, "name": "Gym", "date": "2024-06-11", "endTime": "19:15"})


def test_from_record_rejects_bad_date():
    with pytest.raises(ValidationError):
        Event.from_record({"id": 1, "name": "x", "date": "10/06/2024", "startTime": "09:00", "endTime": "10:00"})


def test_draft_reports_missing_required_fields():
    with pytest.raises(ValidationError) as excinfo:
        EventDraft(name="  ").to_event()

    assert "name" in str(excinfo.value)
    assert "date" in str(excinfo.value)
    assert "start_time" in str(excinfo.value)
    assert "end_time" in str(excinfo.value)


@pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
def test_draft_rejects_zero_length_and_inverted_ranges(make_draft, start, end):
    with pytest.raises(ValidationError, match="before end time"):
        make_draft(start=start, end=end).to_event()


def test_draft_to_event_strips_name_and_keeps_fields(make_draft):
    event = make_draft(name="  Review  ", description="notes", category="work").to_event()

    assert event.id is None
    assert event.name == "Review"
    assert event.description == "notes"
    assert event.category is EventCategory.WORK


def test_draft_from_event_round_trips(make_event):
    original = make_event(event_id=3, description="d")

    assert EventDraft.from_event(original).to_event(3) == original


def test_category_parse():
    assert EventCategory.parse("Work") is EventCategory.WORK
    assert EventCategory.parse(None) is EventCategory.DEFAULT
    with pytest.raises(ValidationError, match="Unknown category"):
        EventCategory.parse("holiday")


def test_parse_time_drops_seconds_and_rejects_garbage():
    assert parse_time("07:05:59") == time(7, 5)
    with pytest.raises(ValidationError):
        parse_time("seven")


def test_event_helpers(make_event):
    event = make_event(event_id=9, start="09:00", end="10:30")

    assert event.duration == timedelta(minutes=90)
    assert event.time_range == "09:00-10:30"
    assert event.moved_to(date(2024, 6, 12)).date == date(2024, 6, 12)
    assert event.moved_to(date(2024, 6, 12)).id == 9
