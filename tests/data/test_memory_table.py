import uuid

import polars as pl
import pytest
from pydantic import ValidationError

from resact.core.errors import MultipleResultsError, ValidationFailure
from resact.core.schema import FieldSpec, ResourceSchema
from resact.data import Backend, MemoryTable, ref
from resact.data.errors import DuplicateKeyError, StaleRecordError
from resact.data.records import polars_schema, record_model, storage_value


def _schema() -> ResourceSchema:
    return ResourceSchema(
        name="account_holder",
        fields=[
            FieldSpec(name="id", type="uuid", primary_key=True, default_factory=uuid.uuid4),
            FieldSpec(name="name", allow_nil=False),
            FieldSpec(name="age", type="i64"),
            FieldSpec(name="score", type="f64", default=0.0),
            FieldSpec(name="active", type="bool", default=True),
        ],
    )


def test_polars_schema_follows_field_types() -> None:
    assert polars_schema(_schema()) == {
        "id": pl.String,
        "name": pl.String,
        "age": pl.Int64,
        "score": pl.Float64,
        "active": pl.Boolean,
    }


def test_record_model_carries_defaults_and_requirements() -> None:
    model = record_model(_schema())
    assert model.__name__ == "AccountHolderRecord"
    record = model(name="ada")
    assert isinstance(record.id, uuid.UUID)
    assert (record.age, record.score, record.active) == (None, 0.0, True)
    with pytest.raises(ValidationError):
        model()
    with pytest.raises(ValidationError):
        model(name="ada", unknown=1)


def test_memory_table_satisfies_backend_protocol() -> None:
    assert isinstance(MemoryTable(_schema()), Backend)


def test_create_and_query_round_trip() -> None:
    table = MemoryTable(_schema())
    ada = table.create({"name": "ada", "age": 36})
    table.create({"name": "bob", "age": 20, "active": False})

    assert len(table) == 2
    assert table.frame.schema["id"] == pl.String
    assert table.query_one(ref("id") == storage_value(ada.id)) == ada
    assert [r.name for r in table.query(ref("active"))] == ["ada"]
    assert len(table.query()) == 2
    assert table.query_one(ref("name") == "nobody") is None


def test_query_one_rejects_ambiguous_filters() -> None:
    table = MemoryTable(_schema())
    table.create({"name": "ada"})
    table.create({"name": "ada"})
    with pytest.raises(MultipleResultsError) as info:
        table.query_one(ref("name") == "ada")
    assert info.value.count == 2


def test_invalid_create_stores_nothing() -> None:
    table = MemoryTable(_schema())
    with pytest.raises(ValidationFailure) as info:
        table.create({"age": "not a number"})
    fields = {d["field"] for d in info.value.details}
    assert {"name", "age"} <= fields
    assert len(table) == 0


def test_duplicate_primary_key_is_rejected() -> None:
    table = MemoryTable(_schema())
    ada = table.create({"name": "ada"})
    with pytest.raises(DuplicateKeyError):
        table.create({"id": ada.id, "name": "again"})
    assert len(table) == 1


def test_update_changes_only_given_columns() -> None:
    table = MemoryTable(_schema())
    ada = table.create({"name": "ada", "age": 36})
    bob = table.create({"name": "bob", "age": 20})

    updated = table.update(ada, {"age": 37})
    assert updated.age == 37 and updated.name == "ada"
    assert table.query_one(ref("id") == str(ada.id)).age == 37
    assert table.query_one(ref("id") == str(bob.id)).age == 20


def test_invalid_update_leaves_row_untouched() -> None:
    table = MemoryTable(_schema())
    ada = table.create({"name": "ada", "age": 36})
    with pytest.raises(ValidationFailure):
        table.update(ada, {"name": None})
    assert table.query_one(ref("id") == str(ada.id)).name == "ada"


def test_update_of_unknown_record_is_stale() -> None:
    table = MemoryTable(_schema())
    ada = table.create({"name": "ada"})
    table.clear()
    with pytest.raises(StaleRecordError):
        table.update(ada, {"age": 1})
