"""Runtime values for Linger.

Linger values map onto plain Python objects wherever possible:

* ``Num``  -> ``int`` (restricted to the signed 64-bit range)
* ``Bool`` -> ``bool``
* ``Str``  -> ``str``

The two remaining kinds get small classes of their own: ``LambdaVal`` for
closures and the ``VOID`` singleton for statements that produce nothing
useful. Because ``bool`` is a subclass of ``int`` in Python, every check in
this module tests for booleans first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class VoidVal:
    """Marker object for the Linger `void` value."""
    _instance: Optional['VoidVal'] = None

    def __new__(cls) -> 'VoidVal':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<void>'


VOID = VoidVal()


@dataclass(eq=False)
class LambdaVal:
    """A closure: parameters, a core statement list and the captured scope.

    ``env`` is the defining environment itself, not a copy, so mutations
    made through any other reference to that scope stay visible inside the
    closure. ``name`` is only set for top-level procedures and is used in
    debug output.
    """
    params: List[str]
    body: List[Any]
    env: Any
    name: Optional[str] = None

    def __repr__(self) -> str:
        if self.name:
            return f"<proc {self.name}>"
        return '<lambda>'


def is_num(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def in_int64_range(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def type_name(value: Any) -> str:
    """Return the Linger type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Num'
    if isinstance(value, str):
        return 'Str'
    if isinstance(value, LambdaVal):
        return 'Lambda'
    if isinstance(value, VoidVal):
        return 'Void'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a Linger value to the text `print` writes for it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, LambdaVal):
        return '<lambda>'
    if isinstance(value, VoidVal):
        return '<void>'
    return str(value)
