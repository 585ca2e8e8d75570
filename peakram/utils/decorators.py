"""Helper decorators used within peakram.

The :func:`singleton` caches the configurations, which are loaded only once per run, and the
:func:`validate_arguments` checks the keys of the configuration before they are used.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Callable
import functools
import inspect

# Third-Party Imports

# Peakram Imports
from peakram.utils.exceptions import InvalidParameterException


registered_singletons: list[Callable[[], Any]] = []


def singleton(func: Callable[[], Any]) -> Callable[[], Any]:
    """Caches the result of the first call of the parameterless @p func

    The cached results of all singletons can be dropped by :func:`reset_singletons` (e.g. between
    tests or between runs of the CLI).

    :param function func: function without parameters
    :returns: function returning the same object on every call
    """
    func.instance = None  # type: ignore
    registered_singletons.append(func)

    @functools.wraps(func)
    def wrapper() -> Any:
        if func.instance is None:  # type: ignore
            func.instance = func()  # type: ignore
        return func.instance  # type: ignore

    return wrapper


def reset_singletons() -> None:
    """Drops the cached results of all registered singletons"""
    for registered in registered_singletons:
        registered.instance = None  # type: ignore


def validate_arguments(
    validated_args: list[str], validate: Callable[[Any], bool]
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Checks the named arguments of the decorated function by @p validate before the call

    :param list validated_args: names of the checked arguments
    :param function validate: predicate which the value of each checked argument must satisfy
    :raises InvalidParameterException: when some of the checked arguments is invalid
    :returns: decorator of the function
    """

    def inner_decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        arg_names = inspect.getfullargspec(func).args

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            passed = list(zip(arg_names, args)) + list(kwargs.items())
            for name, value in passed:
                if name in validated_args and not validate(value):
                    raise InvalidParameterException(name, value)
            return func(*args, **kwargs)

        return wrapper

    return inner_decorator
