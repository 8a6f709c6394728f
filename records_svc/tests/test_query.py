"""
Tests for the lazy query builder and predicate composition.
"""
from datetime import date

import pytest

from conftest import make_patient
from repositories.query import Condition, Field, Query, conjunction
from models import Patient


def _seed(uow, *specs):
    for name, id_number, birth in specs:
        uow.patients.add(make_patient(name=name, id_number=id_number, birth_date=birth))
    uow.commit()


# =============================================================================
# PREDICATES
# =============================================================================

def test_field_equality_binds_parameter():
    """Test that comparisons compile to parameterized SQL."""
    condition = Field("name") == "Alice"
    assert condition.sql == "name = ?"
    assert condition.params == ("Alice",)
    assert condition.fields == frozenset({"name"})


def test_field_none_compiles_to_is_null():
    assert (Field("email") == None).sql == "email IS NULL"  # noqa: E711
    assert (Field("email") != None).sql == "email IS NOT NULL"  # noqa: E711


def test_field_date_values_are_stored_form():
    """Test that date operands are converted the same way stored values are."""
    condition = Field("birth_date") >= date(2000, 1, 2)
    assert condition.params == ("2000-01-02",)


def test_conditions_combine_with_operators():
    condition = (Field("name") == "A") & ~(Field("id") > 3) | (Field("id") == 9)
    assert "AND" in condition.sql
    assert "NOT" in condition.sql
    assert "OR" in condition.sql
    assert condition.params == ("A", 3, 9)
    assert condition.fields == frozenset({"name", "id"})


def test_conjunction_of_nothing_is_none():
    assert conjunction([]) is None


def test_in_with_no_values_matches_nothing(uow):
    _seed(uow, ("Alice", "A1", date(1990, 1, 1)))
    assert uow.patients.query().where(Field("id").in_([])).count() == 0


def test_field_is_not_hashable():
    with pytest.raises(TypeError):
        hash(Field("name"))


# =============================================================================
# BUILDERS
# =============================================================================

def test_builders_do_not_mutate(uow):
    """Test that every builder returns a new query."""
    base = uow.patients.query()
    filtered = base.where(Field("name") == "Alice")
    ordered = filtered.order_by("name")
    assert base.conditions == ()
    assert len(filtered.conditions) == 1
    assert filtered.ordering == ()
    assert len(ordered.ordering) == 1


def test_unknown_column_rejected(uow):
    query = uow.patients.query()
    with pytest.raises(ValueError, match="Unknown column"):
        query.where(Field("nope") == 1)
    with pytest.raises(ValueError, match="Unknown column"):
        query.order_by("nope")
    with pytest.raises(ValueError, match="Unknown column"):
        query.select("id", "nope")


def test_negative_paging_rejected(uow):
    with pytest.raises(ValueError):
        uow.patients.query().skip(-1)
    with pytest.raises(ValueError):
        uow.patients.query().take(-1)


def test_offset_without_limit_compiles(uow):
    sql, params = uow.patients.query().skip(3).to_sql()
    assert sql.endswith("LIMIT -1 OFFSET ?")
    assert params == (3,)


def test_count_sql_ignores_ordering_and_paging(uow):
    query = uow.patients.query().where(Field("name") == "A").order_by("name").skip(5).take(5)
    sql, params = query.to_count_sql()
    assert sql == "SELECT COUNT(*) FROM patients WHERE name = ?"
    assert params == ("A",)


# =============================================================================
# EXECUTION
# =============================================================================

def test_all_returns_entities(uow):
    _seed(uow, ("Alice", "A1", date(1990, 1, 1)))
    patients = uow.patients.query().all()
    assert len(patients) == 1
    assert isinstance(patients[0], Patient)
    assert patients[0].birth_date == date(1990, 1, 1)


def test_projection_returns_only_selected_columns(uow):
    _seed(uow, ("Alice", "A1", date(1990, 1, 1)))
    rows = uow.patients.query().select("name", "birth_date").all()
    assert rows == [{"name": "Alice", "birth_date": date(1990, 1, 1)}]


def test_ordering_and_paging_run_in_store(uow):
    _seed(
        uow,
        ("Carol", "C1", date(1970, 1, 1)),
        ("Alice", "A1", date(1990, 1, 1)),
        ("Bob", "B1", date(1980, 1, 1)),
    )
    names = [
        row["name"]
        for row in uow.patients.query().select("name").order_by("name").skip(1).take(1).all()
    ]
    assert names == ["Bob"]


def test_icontains_is_case_insensitive(uow):
    _seed(uow, ("ALIce", "A1", date(1990, 1, 1)), ("Bob", "B1", date(1980, 1, 1)))
    assert uow.patients.query().where(Field("name").icontains("aLi")).count() == 1


def test_icontains_handles_accented_letters(uow):
    _seed(uow, ("ÉLODIE", "E1", date(1990, 1, 1)))
    assert uow.patients.query().where(Field("name").icontains("élo")).count() == 1


def test_contains_is_case_sensitive(uow):
    _seed(uow, ("Alice", "Ab12", date(1990, 1, 1)))
    assert uow.patients.query().where(Field("id_number").contains("Ab")).count() == 1
    assert uow.patients.query().where(Field("id_number").contains("ab")).count() == 0


def test_contains_treats_wildcards_literally(uow):
    _seed(uow, ("Alice", "A1", date(1990, 1, 1)))
    assert uow.patients.query().where(Field("name").contains("%")).count() == 0


def test_first_and_exists(uow):
    assert uow.patients.query().first() is None
    assert uow.patients.query().exists() is False
    _seed(uow, ("Alice", "A1", date(1990, 1, 1)))
    assert uow.patients.query().first().name == "Alice"
    assert uow.patients.query().exists() is True


def test_query_is_a_plain_value(uow):
    """Two identical descriptions compare equal regardless of session."""
    a = Query(Patient, uow).where(Field("id") == 1)
    b = Query(Patient, None).where(Field("id") == 1)
    assert a == b
    assert isinstance(a.conditions[0], Condition)
