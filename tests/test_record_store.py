from record_store import RecordStore, RECORD_FIELDS


def _store():
    return RecordStore([
        {"id": 1, "Name": "A", "adno": "10"},
        {"id": 2, "Name": "B", "house": "Red"},
    ])


def test_add_record_appends_empty_schema_row():
    store = RecordStore()
    position = store.add_record()

    assert position == 0
    record = store.records[0]
    assert list(record) == list(RECORD_FIELDS)
    assert record["id"]
    assert all(record[f] == "" for f in RECORD_FIELDS if f != "id")


def test_add_record_ids_are_unique():
    store = RecordStore()
    for _ in range(50):
        store.add_record()
    ids = [r["id"] for r in store.records]
    assert len(set(ids)) == 50


def test_add_record_avoids_existing_ids(monkeypatch):
    monkeypatch.setattr("record_store.time.time", lambda: 5.0)
    store = RecordStore([{"id": 5000}, {"id": "5001"}])
    store.add_record()
    assert store.records[-1]["id"] == 5002


def test_add_then_delete_restores_document():
    store = _store()
    before = store.records
    position = store.add_record()
    assert store.delete_record(position)
    assert store.records == before


def test_delete_record_removes_position():
    store = _store()
    assert store.delete_record(0)
    assert store.records == [{"id": 2, "Name": "B", "house": "Red"}]


def test_delete_out_of_range_is_noop():
    store = _store()
    before = store.records
    assert store.delete_record(5) is False
    assert store.delete_record(-1) is False
    assert store.records == before


def test_update_field_isolated():
    store = _store()
    before = store.records
    assert store.update_field(0, "Name", "Z")
    after = store.records
    assert after[0] == {**before[0], "Name": "Z"}
    assert after[1] == before[1]


def test_update_field_adds_missing_field():
    store = _store()
    store.update_field(1, "phone", "555")
    assert store.records[1]["phone"] == "555"
    assert "phone" not in store.records[0]


def test_update_out_of_range_is_noop():
    store = _store()
    assert store.update_field(9, "Name", "Q") is False


def test_records_snapshot_is_detached():
    store = _store()
    snapshot = store.records
    snapshot[0]["Name"] = "changed"
    snapshot.append({})
    assert store.records[0]["Name"] == "A"
    assert len(store) == 2


def test_load_copies_input():
    source = [{"id": 1, "Name": "A"}]
    store = RecordStore(source)
    store.update_field(0, "Name", "B")
    assert source[0]["Name"] == "A"


def test_columns_schema_then_extras():
    store = _store()
    assert store.columns() == list(RECORD_FIELDS) + ["house"]
    assert store.extra_fields(1) == {"house": "Red"}
    assert store.extra_fields(0) == {}
    assert store.extra_fields(7) == {}


def test_get_value_default():
    store = _store()
    assert store.get_value(0, "Name") == "A"
    assert store.get_value(0, "Guardian") == ""
    assert store.get_value(3, "Name", None) is None


def test_add_record_skips_unhashable_ids():
    store = RecordStore([{"id": [1, 2]}, {"id": {"nested": True}}, {"Name": "no id"}])
    position = store.add_record()
    assert position == 3
    assert isinstance(store.records[3]["id"], int)
