"""
Visibility predicates shared by leaf and container definitions.

"Empty" is duck-typed on length: None, '', [], {} and any other sized value
of length 0 are empty; numbers (0 included) and booleans never are.
"""
from typing import Any, Iterable


def is_undefined(value: Any) -> bool:
    return value is None


def is_empty(value: Any) -> bool:
    if is_undefined(value):
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


def hides_any(values: Iterable[Any], hide_if_empty: bool, hide_if_undefined: bool) -> bool:
    """True if at least one resolved value triggers one of the hide flags."""
    return any(
        (hide_if_empty and is_empty(value)) or (hide_if_undefined and is_undefined(value))
        for value in values
    )
