"""Builtin procedures.

Builtins are not values: a call is recognised as a builtin call by the
parser when its callee is the bare identifier of a builtin, and the
interpreter dispatches on the :class:`Builtin` enum. ``print`` is the only
one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from linger.types import VOID, to_string


class Builtin(Enum):
    PRINT = 'print'


def std_print(args: List[Any], sink) -> Any:
    sink.write(' '.join(to_string(a) for a in args))
    return VOID


@dataclass
class BuiltinFunction:
    name: str
    arity: Optional[int]  # None means variadic
    fn: Callable[[List[Any], Any], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


BUILTINS = {
    Builtin.PRINT: BuiltinFunction('print', None, std_print),
}


def lookup_builtin(name: str) -> Optional[Builtin]:
    for builtin in Builtin:
        if builtin.value == name:
            return builtin
    return None
