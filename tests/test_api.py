import json
import threading
import time

import pytest
from fastapi.testclient import TestClient

from vocabdeck.data.state_repo import StateRepo
from vocabdeck.main import app
from vocabdeck.web import dependencies
from vocabdeck.web.dependencies import Workspace


@pytest.fixture
def client(seeded, monkeypatch):
    monkeypatch.setattr(dependencies, "workspace", Workspace())
    with TestClient(app) as c:
        yield c


def row_ids(data):
    return [r["vocab_id"] for r in data["rows"]]


def test_table_lists_entries(client):
    data = client.get("/api/vocabulary").json()
    assert data["total"] == 5
    assert data["error"] is None
    assert row_ids(data) == [1, 2, 3, 4, 5]
    assert [c["id"] for c in data["columns"]][:3] == ["english", "japanese", "furigana"]


def test_membership_filter_from_repeated_fields(client):
    r = client.put("/api/vocabulary/filters/word_category", data={"value": ["noun", "verb"]})
    assert r.status_code == 200
    assert row_ids(r.json()) == [1, 2, 3]
    assert r.json()["filters"] == {"word_category": ["noun", "verb"]}

    r = client.delete("/api/vocabulary/filters/word_category")
    assert row_ids(r.json()) == [1, 2, 3, 4, 5]


def test_integer_filter_and_sort(client):
    client.put("/api/vocabulary/filters/chapter", data={"value": "1, 6-8"})
    r = client.post("/api/vocabulary/sort/times_seen")
    assert row_ids(r.json()) == [4, 5, 3, 1]
    r = client.post("/api/vocabulary/sort/times_seen")
    assert row_ids(r.json()) == [1, 3, 5, 4]
    assert r.json()["sorting"] == [{"column": "times_seen", "direction": "desc"}]


def test_picked_chapters_from_repeated_fields(client):
    r = client.put("/api/vocabulary/filters/chapter", data={"value": ["1", "3"]})
    assert r.status_code == 200
    assert row_ids(r.json()) == [1, 2, 3]
    assert r.json()["filters"] == {"chapter": "1, 3"}


def test_inverted_range_filter_keeps_all_rows(client):
    r = client.put("/api/vocabulary/filters/chapter", data={"value": "5-3"})
    assert row_ids(r.json()) == [1, 2, 3, 4, 5]
    assert r.json()["filters"] == {}


def test_concurrent_toggles_keep_durable_selection_in_step(client, monkeypatch):
    store = dependencies.workspace.selection_store
    real_set_value = store.state_repo.set_value

    def slow_first_write(key, value):
        if json.loads(value) == {"1": True}:
            time.sleep(0.3)
        real_set_value(key, value)

    monkeypatch.setattr(store.state_repo, "set_value", slow_first_write)

    first = threading.Thread(target=client.post, args=("/api/vocabulary/rows/1/toggle",))
    second = threading.Thread(target=client.post, args=("/api/vocabulary/rows/2/toggle",))
    first.start()
    time.sleep(0.1)
    second.start()
    first.join()
    second.join()

    durable = json.loads(StateRepo().get_value(store.key))
    assert durable == store.mapping() == {"1": True, "2": True}


def test_filter_unknown_column(client):
    assert client.put("/api/vocabulary/filters/nope", data={"value": "x"}).status_code == 404
    assert client.put("/api/vocabulary/filters/recently_missed_percent", data={"value": "1"}).status_code == 400


def test_global_filter(client):
    r = client.put("/api/vocabulary/global-filter", data={"query": "na-adj"})
    assert row_ids(r.json()) == [4]


def test_select_visible(client):
    client.put("/api/vocabulary/filters/book", data={"value": ["Genki II"]})
    r = client.post("/api/vocabulary/select-visible", data={"selected": "true"})
    assert r.json()["selected_ids"] == [4]
    assert r.json()["all_visible_selected"] is True


def test_import_then_table_grows(client):
    r = client.post("/api/vocabulary/import", data={"tsv_data": "English\tFurigana\nbird\tとり\n"})
    assert r.status_code == 200
    assert r.json() == {"status": "Imported 1 entries", "total": 6}


def test_import_error(client):
    r = client.post("/api/vocabulary/import", data={"tsv_data": ""})
    assert r.status_code == 400
    assert r.json()["error"] == "Please paste some tab-separated data."


def test_column_finder_endpoints(client):
    r = client.post("/api/columns/finder/select", data={"level": "0", "node_id": "col-book"})
    assert r.status_code == 200
    assert r.json()["path"] == ["col-book"]
    assert len(r.json()["levels"]) == 2

    assert client.post("/api/columns/finder/select", data={"level": "5", "node_id": "x"}).status_code == 400

    r = client.post("/api/columns/chapter/visibility", data={"visible": "false"})
    assert r.status_code == 200
    table = client.get("/api/vocabulary").json()
    assert next(c for c in table["columns"] if c["id"] == "chapter")["visible"] is False
    assert client.post("/api/columns/nope/visibility", data={"visible": "false"}).status_code == 404

    r = client.post("/api/columns/english/size", data={"width": "5"})
    assert r.json() == {"column_id": "english", "size": 30}


def test_flashcards_need_a_session(client):
    r = client.get("/api/flashcards")
    assert r.status_code == 404
    assert "No study session" in r.json()["error"]


def test_study_flow(client):
    client.post("/api/vocabulary/rows/1/toggle")
    assert client.post("/api/vocabulary/rows/3/toggle").json() == {"vocab_id": 3, "selected": True}

    card = client.post("/api/flashcards/start").json()
    assert card["state"] == "active"
    assert card["active_count"] == 2
    assert card["current"]["vocab_id"] == 1

    assert client.post("/api/flashcards/flip").json()["flipped"] is True
    card = client.post("/api/flashcards/next").json()
    assert card["changed"] is True
    assert card["flipped"] is False
    assert card["current"]["vocab_id"] == 3

    card = client.post("/api/flashcards/flag").json()
    assert card["changed"] is True
    assert card["current"]["flag"] == 1
    assert card["feedback"] == '"dog" flagged!'

    card = client.post("/api/flashcards/remove").json()
    assert card["active_count"] == 1
    assert card["current"]["vocab_id"] == 1

    table = client.delete("/api/flashcards").json()
    assert table["selected_ids"] == [1]
    assert next(r for r in table["rows"] if r["vocab_id"] == 3)["flag"] == 1
    assert client.get("/api/flashcards").status_code == 404
