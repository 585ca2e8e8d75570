"""Construction of the units of work from the expressions and callables given by the user.

The units can be given as:

  1. strings with python expressions, which are compiled right away and evaluated in the given
     namespace (by default the scope of the caller) only when measured; the label of the unit is
     the expression itself,
  2. callables (e.g. lambdas or functions), for which the unit evaluates to the callable itself,
     so the runner invokes it and measures the invocation; the label is recovered from the source
     of lambdas or from the qualified name of named functions,
  3. already constructed :class:`UnitOfWork`.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Callable, Iterable, Mapping, Optional
import ast
import functools
import inspect
import types

# Third-Party Imports

# Peakram Imports
from peakram.utils.common import common_kit
from peakram.utils.exceptions import InvalidUnitException
from peakram.utils.structs import Thunk, UnitOfWork, is_thunk

LAMBDA_NAME: str = "<lambda>"


def from_expression(
    expression: str, global_ns: dict[str, Any], local_ns: Optional[Mapping[str, Any]] = None
) -> UnitOfWork:
    """Creates the unit evaluating the expression in the given namespace

    The expression is compiled eagerly, so the syntax errors are reported before anything is
    measured.

    :param str expression: python expression
    :param dict global_ns: global namespace of the evaluation
    :param dict local_ns: local namespace of the evaluation
    :raises InvalidUnitException: when the expression is not valid python expression
    :return: unit of work evaluating the expression
    """
    label = common_kit.collapse_whitespace(expression)
    if not label:
        raise InvalidUnitException(expression, "empty expression")
    try:
        code = compile(expression.strip(), "<peakram>", "eval")
    except SyntaxError as syntax_error:
        raise InvalidUnitException(expression, f"invalid syntax: {syntax_error.msg}") from None

    return UnitOfWork(label, functools.partial(eval, code, global_ns, local_ns))


def from_callable(func: Callable[[], Any], label: Optional[str] = None) -> UnitOfWork:
    """Creates the unit for the callable

    The unit evaluates to the callable itself, so the runner unwraps it, invokes it and measures
    the invocation (and not the construction of the callable). Callables that are not function-like
    (e.g. instances with __call__) are wrapped in :class:`Thunk` marker.

    :param callable func: zero-argument callable
    :param str label: label of the unit, if not set, then it is derived from the callable
    :return: unit of work invoking the callable
    """
    if not callable(func):
        raise InvalidUnitException(func, "object is not callable")
    if not is_thunk(func):
        func = Thunk(func)
    return UnitOfWork(label or label_of(func), lambda: func)


def label_of(func: Callable[..., Any]) -> str:
    """Derives the human-readable label of the callable

    For lambdas, we try to recover the source text of the lambda, for named functions we use their
    qualified name. Otherwise, the representation of the object is used.

    :param callable func: callable for which we are deriving the label
    :return: label of the callable
    """
    if isinstance(func, Thunk):
        return label_of(func.func)
    if isinstance(func, functools.partial):
        return common_kit.collapse_whitespace(repr(func))
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if name and name.split(".")[-1] == LAMBDA_NAME:
        return lambda_source(func) or name
    if name:
        return name
    return common_kit.collapse_whitespace(repr(func))


def lambda_source(func: Callable[..., Any]) -> Optional[str]:
    """Recovers the source text of the lambda function

    The whole module of the lambda is parsed and the lambda expressions starting at the first line
    of the function are the candidates. When there are more candidates (e.g. more lambdas on one
    line), the one which compiled into the code of the function is picked by the source positions
    of its instructions, or by comparing the compiled code on interpreters without positions.

    :param function func: lambda function
    :return: source of the lambda or None if it cannot be recovered unambiguously
    """
    code = getattr(func, "__code__", None)
    if code is None:
        return None
    try:
        lines, _ = inspect.findsource(func)
        source = "".join(lines)
        tree = ast.parse(source)
    except (OSError, TypeError, SyntaxError, ValueError):
        return None

    candidates = [
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.Lambda) and node.lineno == code.co_firstlineno
    ]
    if len(candidates) > 1:
        if hasattr(code, "co_positions"):
            candidates = _match_by_positions(candidates, code)
        else:
            candidates = _match_by_code(candidates, source, code)
    if len(candidates) != 1:
        return None
    segment = ast.get_source_segment(source, candidates[0])
    return common_kit.collapse_whitespace(segment) if segment else None


def _match_by_positions(candidates: list[ast.Lambda], code: types.CodeType) -> list[ast.Lambda]:
    """Picks the lambda, whose body contains the source positions of the instructions of code

    Instructions of the function lie in the body of its own lambda (and in bodies of the enclosing
    lambdas, if nested), but never in the body of a sibling or a nested lambda. Hence, the smallest
    body containing some of the instructions belongs to the function.

    :param list candidates: lambda nodes starting at the first line of the code
    :param code code: code of the lambda function
    :return: list with the matching node or empty list
    """
    positions = [position for position in code.co_positions() if None not in position]
    matching = []
    for node in candidates:
        body = node.body
        start = (body.lineno, body.col_offset)
        end = (body.end_lineno, body.end_col_offset)
        if any(
            start <= (line, col) and (end_line, end_col) <= end
            for line, end_line, col, end_col in positions
        ):
            matching.append(node)
    if not matching:
        return []
    return [min(matching, key=lambda node: (node.end_lineno - node.lineno, _width(node)))]


def _width(node: ast.Lambda) -> int:
    """
    :param ast.Lambda node: lambda node
    :return: width of the node in columns (meaningful for the nodes on the same lines)
    """
    return (node.end_col_offset or 0) - node.col_offset


def _match_by_code(
    candidates: list[ast.Lambda], source: str, code: types.CodeType
) -> list[ast.Lambda]:
    """Picks the lambdas, which compile into the same code as the function

    The lambda is compiled inside a wrapper function defining its free variables, so the
    variables of the enclosing scopes are loaded in the same way as in the original function.

    :param list candidates: lambda nodes starting at the first line of the code
    :param str source: source of the whole module
    :param code code: code of the lambda function
    :return: list of matching nodes
    """
    expected = _code_signature(code)
    matching = []
    for node in candidates:
        segment = ast.get_source_segment(source, node)
        compiled = _compile_lambda(segment, code.co_freevars) if segment else None
        if compiled is not None and _code_signature(compiled) == expected:
            matching.append(node)
    return matching


def _compile_lambda(segment: str, freevars: tuple[str, ...]) -> Optional[types.CodeType]:
    """Compiles the source of the lambda with the given free variables

    :param str segment: source of the lambda expression
    :param tuple freevars: names of the variables from the enclosing scopes
    :return: code of the lambda or None if it cannot be compiled
    """
    cells = f"    {' = '.join(freevars)} = None\n" if freevars else ""
    wrapper = f"def _enclosing():\n{cells}    return ({segment})\n"
    try:
        module_code = compile(wrapper, "<lambda>", "exec")
    except SyntaxError:
        return None
    for enclosing in _nested_code(module_code):
        for lambda_code in _nested_code(enclosing):
            return lambda_code
    return None


def _nested_code(code: types.CodeType) -> list[types.CodeType]:
    """
    :param code code: compiled code
    :return: code objects of the functions defined directly in the code
    """
    return [const for const in code.co_consts if isinstance(const, types.CodeType)]


def _code_signature(code: types.CodeType) -> tuple[Any, ...]:
    """
    :param code code: compiled code
    :return: bytecode, names, constants and free variables of the code
    """
    constants = tuple(const for const in code.co_consts if not isinstance(const, types.CodeType))
    return code.co_code, code.co_names, constants, code.co_freevars


def capture(
    units: Iterable[Any],
    global_ns: dict[str, Any],
    local_ns: Optional[Mapping[str, Any]] = None,
) -> list[UnitOfWork]:
    """Transforms the mixed sequence of expressions, callables and units into units of work

    :param iterable units: expressions (strings), zero-argument callables or units of work
    :param dict global_ns: global namespace for evaluation of expressions
    :param dict local_ns: local namespace for evaluation of expressions
    :raises InvalidUnitException: when some of the units cannot be measured
    :return: list of units of work in the same order
    """
    captured = []
    for unit in units:
        if isinstance(unit, UnitOfWork):
            captured.append(unit)
        elif isinstance(unit, str):
            captured.append(from_expression(unit, global_ns, local_ns))
        elif callable(unit):
            captured.append(from_callable(unit))
        else:
            raise InvalidUnitException(unit, "expected expression string or callable")
    return captured
