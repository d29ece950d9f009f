import json

import pytest

from Eduledger.backup.merge import merge_aggregate
from Eduledger.data.repos import maintenance_repo
from Eduledger.errors import ParseError

from tests.helpers import aggregate, make_attendance, make_student


@pytest.fixture
def current():
    return aggregate(
        students=[make_student("S001", name="An"), make_student("S002", name="Binh")],
        attendance=[make_attendance("C1", "S001", "2024-05-06", record_id="ATT-local")],
        settings={"centerName": "Local", "address": "1 Main St", "phone": "", "onboardingStepsCompleted": []},
    )


def test_backup_wins_and_unseen_records_survive(current):
    backup = {"students": [make_student("S002", name="Binh T."), make_student("S003")]}

    merged = merge_aggregate(current, backup)

    assert [(s["id"], s["name"]) for s in merged["students"]] == [
        ("S001", "An"), ("S002", "Binh T."), ("S003", "Student S003"),
    ]


def test_merge_is_idempotent(current):
    backup = {"students": [make_student("S003")], "settings": {"centerName": "Backup"}}

    once = merge_aggregate(current, backup)
    twice = merge_aggregate(once, backup)

    assert once == twice


def test_empty_backup_changes_nothing(current):
    assert merge_aggregate(current, {}) == current


def test_attendance_merges_on_class_student_date(current):
    backup = {"attendance": [
        make_attendance("C1", "S001", "2024-05-06", status="ABSENT", record_id="ATT-other-device"),
        make_attendance("C1", "S002", "2024-05-06"),
    ]}

    merged = merge_aggregate(current, backup)

    assert len(merged["attendance"]) == 2
    first = merged["attendance"][0]
    assert first["status"] == "ABSENT"
    assert first["id"] == "ATT-other-device"


def test_settings_are_overlaid(current):
    merged = merge_aggregate(current, {"settings": {"centerName": "Backup"}})

    assert merged["settings"]["centerName"] == "Backup"
    assert merged["settings"]["address"] == "1 Main St"


def test_malformed_collection_keeps_current(current):
    merged = merge_aggregate(current, {"students": {"S009": {}}, "classes": "none"})

    assert merged["students"] == current["students"]
    assert merged["classes"] == []


def test_merge_does_not_touch_inputs(current):
    backup = {"students": [make_student("S003")]}
    snapshot = json.dumps(current, sort_keys=True)

    merge_aggregate(current, backup)

    assert json.dumps(current, sort_keys=True) == snapshot
    assert backup == {"students": [make_student("S003")]}


def test_restore_data_persists_normalized_merge(store, current):
    store.save(current)

    maintenance_repo.restore_data(store, {"classes": [{"id": "C1", "name": "Phonics"}]})

    data = store.load()
    assert len(data["students"]) == 2
    assert data["classes"][0]["studentIds"] == []
    assert data["classes"][0]["fee"] == {"type": "MONTHLY", "amount": 0}


def test_restore_rejects_non_object(store):
    with pytest.raises(ParseError):
        maintenance_repo.restore_data(store, [1, 2])


def test_backup_file_round_trip(store, current, tmp_path):
    store.save(current)
    path = tmp_path / "backup.json"

    maintenance_repo.write_backup_file(store, path)
    store.save(aggregate())
    maintenance_repo.restore_data(store, maintenance_repo.read_backup_file(path))

    assert [s["id"] for s in store.list("students")] == ["S001", "S002"]
    assert store.get_settings()["centerName"] == "Local"


@pytest.mark.parametrize("contents", ["{broken", "[]"])
def test_read_backup_file_rejects_bad_content(tmp_path, contents):
    path = tmp_path / "backup.json"
    path.write_text(contents, encoding="utf-8")

    with pytest.raises(ParseError):
        maintenance_repo.read_backup_file(path)
