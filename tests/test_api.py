import orjson
import pytest
from fastapi.testclient import TestClient

from daygrid.api import api_state, call_api
from daygrid.config import get_settings
from daygrid.data import MemoryStorage
from daygrid.services import ServiceContext
from daygrid.services.http import app


@pytest.fixture
def context(app_settings):
    context = ServiceContext(settings=app_settings, storage=MemoryStorage())
    api_state.bind(context)
    yield context
    api_state.reset()


@pytest.fixture
def client(context):
    return TestClient(app)


def _call(client, name, /, **arguments):
    return client.post(f"/api/functions/{name}", json={"arguments": arguments})


def _add(client, name="Standup", date="2024-06-10", start="09:00", end="09:30", **extra):
    return _call(client, "add_event", name=name, date=date, start_time=start, end_time=end, **extra)


def test_functions_are_listed(client):
    response = client.get("/api/functions")

    assert response.status_code == 200
    names = {item["name"] for item in response.json()["functions"]}
    assert {"add_event", "move_event", "delete_event", "month_grid", "export_month"} <= names
    add = next(item for item in response.json()["functions"] if item["name"] == "add_event")
    assert set(add["parameters"]["required"]) == {"name", "date", "start_time", "end_time"}


def test_add_event(client, context):
    response = _add(client, description="daily", category="work")

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["event"]["startTime"] == "09:00"
    assert result["event"]["category"] == "work"
    assert result["notification"]["title"] == "Event Added"
    assert len(context.store) == 1


def test_overlap_is_a_conflict(client, context):
    _add(client)

    response = _add(client, name="Overlap", start="09:15", end="09:45")

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "ConflictError"
    assert body["notification"]["title"] == "Event Overlap"
    assert body["notification"]["variant"] == "destructive"
    assert len(context.store) == 1


def test_inverted_time_is_unprocessable(client):
    response = _add(client, start="10:00", end="09:00")

    assert response.status_code == 422
    assert "before end time" in response.json()["detail"]


def test_move_unknown_event_is_not_found(client):
    response = _call(client, "move_event", event_id=404, new_date="2024-06-11")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_unknown_function_is_not_found(client):
    assert _call(client, "launch_rockets").status_code == 404


def test_unexpected_argument_is_unprocessable(client):
    response = _call(client, "delete_event", ident=3)

    assert response.status_code == 422
    assert "ident" in response.json()["detail"]


@pytest.mark.parametrize(
    "function,arguments",
    [
        ("move_event", {"event_id": "abc", "new_date": "2024-06-11"}),
        ("delete_event", {"event_id": "abc"}),
        ("navigate_month", {"reference": "2024-06-01", "delta": "next"}),
        ("export_month", {"year": "this", "month": 6}),
        ("export_month", {"year": 2024, "month": "june"}),
    ],
)
def test_mistyped_arguments_are_unprocessable(client, function, arguments):
    response = _call(client, function, **arguments)

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


def test_numeric_strings_are_accepted(client):
    event_id = _add(client).json()["result"]["event"]["id"]

    response = _call(client, "delete_event", event_id=str(event_id))

    assert response.status_code == 200
    assert response.json()["result"]["removed"] is True


def test_call_api_accepts_a_name_argument(context):
    result = call_api("add_event", name="Standup", date="2024-06-10", start_time="09:00", end_time="09:30")

    assert result["event"]["name"] == "Standup"
    assert len(context.store) == 1


def test_rejected_input_is_notified_once(client, context):
    _add(client, start="10:00", end="09:00")
    _call(client, "move_event", event_id=1, new_date="not-a-date")
    _call(client, "move_event", event_id=1, new_date="2024-06-11")
    _call(client, "delete_event", event_id="abc")
    _add(client)
    _add(client, name="Overlap", start="09:15", end="09:45")

    titles = [notification.title for notification in context.notifier.history]
    assert titles == [
        "Invalid Event",
        "Invalid Event",
        "Event Not Found",
        "Invalid Event",
        "Event Added",
        "Event Overlap",
    ]


def test_unreadable_event_file_is_unavailable(tmp_path, monkeypatch):
    events_file = tmp_path / "events.json"
    events_file.write_text(
        '[{"id": 1, "name": "A", "date": "2024-06-10", "startTime": "10:00", "endTime": "09:00"}]',
        encoding="utf-8",
    )
    monkeypatch.setenv("DAYGRID_EVENTS_FILE", str(events_file))
    get_settings.cache_clear()
    api_state.reset()
    try:
        response = _call(TestClient(app), "list_events")
    finally:
        api_state.reset()
        get_settings.cache_clear()

    assert response.status_code == 503
    assert response.json()["notification"]["title"] == "Storage Failed"


def test_update_move_and_delete_flow(client):
    event_id = _add(client).json()["result"]["event"]["id"]

    updated = _call(
        client,
        "update_event",
        event_id=event_id,
        name="Daily",
        date="2024-06-10",
        start_time="08:30",
        end_time="09:00",
    )
    moved = _call(client, "move_event", event_id=event_id, new_date="2024-06-12")
    day = _call(client, "events_for_day", day="2024-06-12")
    deleted = _call(client, "delete_event", event_id=event_id)

    assert updated.json()["result"]["event"]["name"] == "Daily"
    assert moved.json()["result"]["event"]["date"] == "2024-06-12"
    assert [item["id"] for item in day.json()["result"]["events"]] == [event_id]
    assert deleted.json()["result"]["removed"] is True
    assert _call(client, "list_events").json()["result"]["events"] == []


def test_filter_events(client):
    _add(client)
    _add(client, name="Lunch", start="12:00", end="13:00", description="with STANDUP crew")
    _add(client, name="Gym", start="18:00", end="19:00")

    response = _call(client, "filter_events", query="standup")

    assert [item["name"] for item in response.json()["result"]["events"]] == ["Standup", "Lunch"]


def test_month_grid(client):
    _add(client)

    result = _call(client, "month_grid", reference="2024-06-15", selected="2024-06-10").json()["result"]

    assert result["month"]["daysInMonth"] == 30
    assert result["month"]["firstDayOffset"] == 6
    assert result["weekdays"][0] == "Sun"
    assert len(result["cells"]) == 36
    tenth = result["cells"][6 + 9]
    assert tenth["day"] == 10
    assert tenth["isSelected"] is True
    assert [item["name"] for item in tenth["events"]] == ["Standup"]


def test_navigate_month(client):
    result = _call(client, "navigate_month", reference="2024-12-20", delta=1).json()["result"]

    assert result["reference"] == "2025-01-01"
    assert result["month"]["year"] == 2025


def test_export_month_writes_file(client, app_settings):
    _add(client, date="2024-06-01")
    _add(client, date="2024-07-01")

    result = _call(client, "export_month", year=2024, month=6, write=True).json()["result"]

    assert result["fileName"] == "events_2024_6.json"
    assert [item["date"] for item in result["events"]] == ["2024-06-01"]
    written = app_settings.storage.export_dir / "events_2024_6.json"
    assert result["path"] == str(written)
    assert orjson.loads(written.read_bytes()) == result["events"]


def test_list_available_tools(context):
    tools = call_api("list_available_tools")["tools"]

    names = [tool["name"] for tool in tools]
    assert names == sorted(names)
    assert "list_available_tools" in names
