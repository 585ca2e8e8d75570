"""Tests of construction of the units of work from expressions and callables"""
from __future__ import annotations

# Standard Imports
import functools

# Third-Party Imports
import pytest

# Peakram Imports
from peakram.logic import units
from peakram.utils.exceptions import InvalidUnitException
from peakram.utils.structs import Thunk, UnitOfWork, is_thunk


def make_list():
    return [0] * 10


class Factory:
    def build(self):
        return {}

    def __call__(self):
        return []


def test_expression_label_and_evaluation():
    """Test that the expression is labeled by its source and evaluated lazily in namespace"""
    namespace = {"values": [1, 2, 3]}
    unit = units.from_expression("  (sum(values)\n   * 2) ", namespace)

    assert unit.label == "(sum(values) * 2)"
    namespace["values"] = [10]
    assert unit.thunk() == 20


def test_expression_with_local_namespace():
    """Test that local namespace shadows the global one"""
    unit = units.from_expression("x + y", {"x": 1, "y": 1}, {"y": 41})
    assert unit.thunk() == 42


@pytest.mark.parametrize("expression", ["", "   ", "\n"])
def test_empty_expression(expression):
    """Test that empty expressions are rejected"""
    with pytest.raises(InvalidUnitException):
        units.from_expression(expression, {})


def test_invalid_expression():
    """Test that syntax errors are reported before the measurement"""
    with pytest.raises(InvalidUnitException) as exc:
        units.from_expression("x = 1", {})
    assert "invalid syntax" in str(exc.value)

    with pytest.raises(InvalidUnitException):
        units.from_expression("np.arange(", {})


def test_expression_errors_are_deferred():
    """Test that runtime errors of the expressions are raised only during evaluation"""
    unit = units.from_expression("undefined_name + 1", {})
    with pytest.raises(NameError):
        unit.thunk()


def test_lambda_labels():
    """Test that the source of lambdas is recovered"""
    unit = units.from_callable(lambda: [0] * 10)
    assert unit.label == "lambda: [0] * 10"

    first, second = lambda: 1 + 2, lambda: [3]
    assert units.label_of(first) == "lambda: 1 + 2"
    assert units.label_of(second) == "lambda: [3]"

    # Lambdas created dynamically might have no source
    dynamic = eval("lambda: 1")
    assert units.label_of(dynamic) in ("<lambda>", "lambda: 1")


def test_lambda_labels_on_one_line():
    """Test that lambdas with the same bytecode on one line get their own labels"""
    first, second = lambda: sum([1]), lambda: len([1])
    assert units.label_of(first) == "lambda: sum([1])"
    assert units.label_of(second) == "lambda: len([1])"

    data = [1, 2, 3]
    doubled, added = lambda: data * 2, lambda: data + data
    assert units.label_of(doubled) == "lambda: data * 2"
    assert units.label_of(added) == "lambda: data + data"

    outer = lambda: (lambda: [0])
    assert units.label_of(outer) == "lambda: (lambda: [0])"
    assert units.label_of(outer()) == "lambda: [0]"


def test_named_callable_labels():
    """Test the labels of named functions, methods, partials and other callables"""
    assert units.from_callable(make_list).label == "make_list"
    assert units.from_callable(Factory().build).label == "Factory.build"
    assert units.from_callable(len, label="length").label == "length"
    assert "functools.partial" in units.from_callable(functools.partial(sum, [1, 2])).label

    unit = units.from_callable(Factory)
    assert unit.label == "Factory"


def test_callable_unit_evaluates_to_thunk():
    """Test that callable units defer the invocation to the runner"""
    unit = units.from_callable(make_list)
    assert unit.thunk() is make_list

    wrapped = units.from_callable(Factory()).thunk()
    assert isinstance(wrapped, Thunk)
    assert wrapped() == []

    # Classes are wrapped, so the runner instantiates them
    assert isinstance(units.from_callable(Factory).thunk()(), Factory)


def test_not_callable():
    """Test that non-callable objects are rejected"""
    with pytest.raises(InvalidUnitException) as exc:
        units.from_callable(42)
    assert "not callable" in str(exc.value)


def test_is_thunk():
    """Test which values are considered deferred computations"""
    assert is_thunk(lambda: None)
    assert is_thunk(make_list)
    assert is_thunk(Factory().build)
    assert is_thunk(len)
    assert is_thunk(functools.partial(sum, []))
    assert is_thunk(Thunk(list))

    assert not is_thunk(Factory)
    assert not is_thunk(Factory())
    assert not is_thunk([1, 2])
    assert not is_thunk("lambda: None")


def test_capture():
    """Test capturing the mixed sequence of units"""
    prepared = UnitOfWork("prepared", lambda: None)
    captured = units.capture(["len(data)", make_list, prepared], {"data": [1, 2]})

    assert [unit.label for unit in captured] == ["len(data)", "make_list", "prepared"]
    assert captured[0].thunk() == 2
    assert captured[2] is prepared

    with pytest.raises(InvalidUnitException):
        units.capture(["1 + 1", 3.14], {})
