"""Tests for expression primitives."""

import operator

import pytest

from string_tables import UnboundField, UnboundRow
from string_tables.expressions import (
    FALSE,
    TRUE,
    Counter,
    Expression,
    and_,
    bool_op,
    concat,
    const,
    contains,
    counter,
    equals,
    field,
    not_,
    not_equals,
    or_,
    string_op,
)
from string_tables.row import Row


@pytest.fixture
def row():
    """A row holding a name and an id."""
    r = Row()
    r.update("name", "Bob")
    r.update("id", "12")
    return r


class Recorder(Expression):
    """Records the order in which it is evaluated."""

    def __init__(self, log, label, value):
        self.log = log
        self.label = label
        self.value = value

    def evaluate(self, row):
        self.log.append(self.label)
        return self.value


class TestPrimitives:
    """Tests for the basic expressions."""

    def test_field(self, row):
        assert field("name")(row) == "Bob"

    def test_field_unknown(self, row):
        with pytest.raises(UnboundField):
            field("age")(row)

    def test_field_destroyed_row(self, row):
        row.destroy()
        with pytest.raises(UnboundRow):
            field("name")(row)

    def test_const_ignores_row(self, row):
        assert const("x")(row) == "x"
        assert const("")(row) == ""

    def test_concat(self, row):
        assert concat(field("name"), const("ette"))(row) == "Bobette"
        assert concat(const(""), const(""))(row) == ""

    def test_equals(self, row):
        assert equals(field("id"), const("12"))(row) == "true"
        assert equals(field("id"), const("14"))(row) == "false"

    def test_equals_is_exact(self, row):
        assert equals(field("name"), const("bob"))(row) == "false"
        assert equals(field("id"), const("12 "))(row) == "false"

    def test_contains(self, row):
        assert contains(field("name"), const("ob"))(row) == "true"
        assert contains(field("name"), const("Bob"))(row) == "true"
        assert contains(field("name"), const("x"))(row) == "false"

    def test_contains_empty_needle(self, row):
        assert contains(field("name"), const(""))(row) == "true"

    def test_contains_is_literal(self):
        """Regex metacharacters are matched literally."""
        r = Row()
        r.update("text", "a.b*c")
        assert contains(field("text"), const(".b*"))(r) == "true"
        assert contains(field("text"), const("a.*c"))(r) == "false"

    def test_contains_operand_order(self, row):
        assert contains(const("B"), field("name"))(row) == "false"


class TestBooleanOperators:
    """Tests for bool_op and the helpers built on it."""

    @pytest.mark.parametrize(
        "left, right, expected",
        [("true", "true", "true"), ("true", "false", "false"), ("false", "false", "false"), ("yes", "", "true")],
    )
    def test_and(self, row, left, right, expected):
        assert and_(const(left), const(right))(row) == expected

    def test_or(self, row):
        assert or_(FALSE, TRUE)(row) == "true"
        assert or_(FALSE, FALSE)(row) == "false"

    def test_only_false_is_false(self, row):
        """Any string other than "false" reads as true."""
        assert bool_op(operator.and_, const("False"), const("0"))(row) == "true"

    def test_not(self, row):
        assert not_(TRUE)(row) == "false"
        assert not_(FALSE)(row) == "true"
        assert not_(const("anything"))(row) == "false"

    def test_not_equals(self, row):
        assert not_equals(field("id"), const("14"))(row) == "true"
        assert not_equals(field("id"), const("12"))(row) == "false"

    def test_no_short_circuit(self, row):
        """Both operands are evaluated even when the left decides the result."""
        log = []
        expr = and_(Recorder(log, "left", "false"), Recorder(log, "right", "true"))
        assert expr(row) == "false"
        assert log == ["left", "right"]

    def test_op_receives_booleans(self, row):
        seen = []

        def op(a, b):
            seen.append((a, b))
            return a

        bool_op(op, const("x"), const("false"))(row)
        assert seen == [(True, False)]


class TestStringOp:
    """Tests for string_op and stateful expressions."""

    def test_string_op(self, row):
        pair = string_op(lambda a, b: f"({a},{b})", field("id"), field("name"))
        assert pair(row) == "(12,Bob)"

    def test_string_op_result_verbatim(self, row):
        assert string_op(lambda a, b: "false", TRUE, TRUE)(row) == "false"

    @pytest.mark.parametrize("build", [concat, equals, contains, lambda l, r: string_op(lambda a, b: a + b, l, r)])
    def test_left_evaluated_first(self, row, build):
        log = []
        build(Recorder(log, "left", "a"), Recorder(log, "right", "b"))(row)
        assert log == ["left", "right"]

    def test_stateful_string_op(self, row):
        state = {"n": 0}

        def next_number(a, b):
            state["n"] += 1
            return str(state["n"])

        expr = string_op(next_number, const("fake"), const("fake"))
        assert [expr(row) for _ in range(3)] == ["1", "2", "3"]

    def test_counter(self, row):
        expr = counter()
        assert [expr(row) for _ in range(3)] == ["1", "2", "3"]
        assert expr.value == 4

    def test_counter_start_and_step(self, row):
        expr = Counter(10, 5)
        assert expr(row) == "10"
        assert expr(row) == "15"


class TestExpressionValues:
    """Expressions compare by structure."""

    def test_structural_equality(self):
        assert equals(field("id"), const("14")) == equals(field("id"), const("14"))
        assert equals(field("id"), const("14")) != equals(field("id"), const("7"))

    def test_base_class_is_abstract(self):
        with pytest.raises(NotImplementedError):
            Expression().evaluate(Row())
