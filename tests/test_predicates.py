"""
Tests for predicate compilation into parameterized WHERE clauses.
"""

import pytest

from project_tracker_api.app.core.exceptions import ValidationError
from project_tracker_api.app.services.predicates import (
    PROJECTS,
    TASKS,
    Operator,
    Predicate,
    build_where,
    compile_predicate,
)


def test_no_predicates_gives_no_where_clause():
    assert build_where(TASKS) == ("", [])


def test_all_of_is_conjunctive():
    where, params = build_where(
        TASKS,
        all_of=[
            Predicate("project_id", Operator.EQUALS, "p1"),
            Predicate("status", Operator.EQUALS, "blocked"),
        ],
    )

    assert where == " WHERE tasks.project_id = ? AND tasks.status = ?"
    assert params == ["p1", "blocked"]


def test_any_of_is_a_parenthesized_disjunction():
    where, params = build_where(
        TASKS,
        all_of=[Predicate("project_id", Operator.EQUALS, "p1")],
        any_of=[
            Predicate("title", Operator.CONTAINS, "Report"),
            Predicate("assignee", Operator.CONTAINS, "Report"),
        ],
    )

    assert where == (
        " WHERE tasks.project_id = ? AND "
        "(instr(casefold(tasks.title), ?) > 0 OR instr(casefold(tasks.assignee), ?) > 0)"
    )
    assert params == ["p1", "report", "report"]


def test_empty_any_of_is_rejected():
    with pytest.raises(ValidationError):
        build_where(PROJECTS, any_of=[])


def test_user_input_is_never_part_of_the_sql():
    hostile = "x') OR 1=1 --"
    sql, params = compile_predicate(PROJECTS, Predicate("name", Operator.CONTAINS, hostile))

    assert hostile not in sql
    assert params == [hostile.casefold()]


def test_any_of_values_are_bound():
    sql, params = compile_predicate(PROJECTS, Predicate("tags", Operator.ANY_OF, ["web", "q3"]))

    assert "json_each(projects.tags)" in sql
    assert sql.count("?") == 2
    assert params == ["web", "q3"]


def test_unknown_column_is_rejected():
    with pytest.raises(ValidationError):
        compile_predicate(PROJECTS, Predicate("name; DROP TABLE projects", Operator.EQUALS, "x"))


def test_operator_must_fit_column_kind():
    with pytest.raises(ValidationError):
        compile_predicate(PROJECTS, Predicate("tags", Operator.EQUALS, "web"))
    with pytest.raises(ValidationError):
        compile_predicate(TASKS, Predicate("title", Operator.ANY_OF, ["a"]))
