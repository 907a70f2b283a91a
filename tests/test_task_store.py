import json

import pytest

from calendar_backend.task_store import TaskStore, TaskStoreError


DATA = {
    "companies": [
        {"id": "c1", "name": "Acme Ltda"},
        {"id": "c2", "fantasyName": "Beta"},
        {"name": "no id"},
    ],
    "tasks": [
        {"id": "t1", "companyId": "c1", "title": "Ligar", "dueDate": "2024-02-15T12:30:00.000Z", "isCompleted": False},
        {"id": "t2", "companyId": "c2", "title": "Proposta", "dueDate": "2024-02-15T08:00:00", "isCompleted": True},
        {"id": "bad", "title": "Sem data", "dueDate": "amanhã"},
        {"title": "Sem id", "dueDate": "2024-02-15T08:00:00"},
    ],
    "owner": "vendas",
}


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "crm.json"
    path.write_text(json.dumps(DATA), encoding="utf-8")
    return path


def test_load_skips_malformed_records(data_file):
    store = TaskStore(data_file)
    assert store.load() == 2
    assert [t.id for t in store.get_tasks()] == ["t1", "t2"]
    assert store.get_company_name("c1") == "Acme Ltda"
    assert store.get_company_name("c2") == "Beta"
    assert store.get_company_name("c9") is None
    assert store.get_company("c1").name == "Acme Ltda"


def test_missing_file_is_empty(tmp_path):
    store = TaskStore(tmp_path / "absent.json")
    assert store.load() == 0
    assert store.get_tasks() == []


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "crm.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(TaskStoreError):
        TaskStore(path).load()


def test_non_object_raises(tmp_path):
    path = tmp_path / "crm.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(TaskStoreError):
        TaskStore(path).load()


def test_toggle_persists_and_notifies(data_file):
    store = TaskStore(data_file)
    store.load()
    changes = []
    store.set_on_change_callback(lambda: changes.append(True))

    assert store.toggle_task("t1") is True
    assert store.get_task("t1").is_completed
    assert changes == [True]

    reloaded = TaskStore(data_file)
    reloaded.load()
    assert reloaded.get_task("t1").is_completed

    saved = json.loads(data_file.read_text(encoding="utf-8"))
    assert saved["owner"] == "vendas"
    assert len(saved["companies"]) == 3


def test_toggle_unknown_task(data_file):
    store = TaskStore(data_file)
    store.load()
    changes = []
    store.set_on_change_callback(lambda: changes.append(True))
    assert store.toggle_task("nope") is False
    assert changes == []


def test_reload_notifies(data_file):
    store = TaskStore(data_file)
    store.load()
    changes = []
    store.set_on_change_callback(lambda: changes.append(True))
    store.reload()
    assert changes == [True]


def test_toggle_keeps_unparsed_records_and_extra_keys(tmp_path):
    path = tmp_path / "crm.json"
    path.write_text(json.dumps({
        "tasks": [
            {"id": "t1", "title": "Ligar", "dueDate": "2024-02-15T09:00:00", "isCompleted": False, "priority": "alta"},
            {"id": "t2", "title": "Sem data", "dueDate": None},
        ],
    }), encoding="utf-8")
    store = TaskStore(path)
    assert store.load() == 1

    store.toggle_task("t1")

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert [t["id"] for t in saved["tasks"]] == ["t1", "t2"]
    assert saved["tasks"][0] == {
        "id": "t1", "title": "Ligar", "dueDate": "2024-02-15T09:00:00",
        "isCompleted": True, "priority": "alta",
    }
    assert saved["tasks"][1] == {"id": "t2", "title": "Sem data", "dueDate": None}


def test_toggle_snake_case_record(tmp_path):
    path = tmp_path / "crm.json"
    path.write_text(json.dumps({
        "tasks": [{"id": "t1", "title": "x", "due_date": "2024-02-15T09:00:00", "is_completed": True}],
    }), encoding="utf-8")
    store = TaskStore(path)
    store.load()
    assert store.toggle_task("t1") is False
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["tasks"][0]["is_completed"] is False
    assert "isCompleted" not in saved["tasks"][0]


@pytest.mark.parametrize("content", [
    {"companies": [], "tasks": None},
    {"companies": None, "tasks": None},
    {},
])
def test_null_or_missing_lists_are_empty(tmp_path, content):
    path = tmp_path / "crm.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    store = TaskStore(path)
    assert store.load() == 0
    assert store.get_tasks() == []


@pytest.mark.parametrize("content", [
    {"tasks": {"id": "t1"}},
    {"tasks": [], "companies": "Acme"},
])
def test_non_list_records_raise(tmp_path, content):
    path = tmp_path / "crm.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    with pytest.raises(TaskStoreError):
        TaskStore(path).load()


def test_failed_save_undoes_toggle(data_file, monkeypatch):
    store = TaskStore(data_file)
    store.load()
    changes = []
    store.set_on_change_callback(lambda: changes.append(True))
    monkeypatch.setattr(store, "save", lambda: False)

    with pytest.raises(TaskStoreError):
        store.toggle_task("t1")

    assert store.get_task("t1").is_completed is False
    assert changes == []
    assert store._raw_task("t1")["isCompleted"] is False
