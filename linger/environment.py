from typing import Any, Dict, Optional, Set

from linger.errors import ConstantReassignment, UnknownVariable


class Environment:
    """A scope mapping identifiers to values, with an optional parent scope.

    Lookups and assignments walk outwards through parents. Bindings made with
    ``let`` or ``const`` always land in the scope they are made in.
    """
    def __init__(self, parent: Optional['Environment'] = None,
                 bindings: Optional[Dict[str, Any]] = None):
        self.parent = parent
        self.values: Dict[str, Any] = dict(bindings or {})
        self.consts: Set[str] = set()

    def lookup(self, name: str) -> Any:
        env = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        raise UnknownVariable(name)

    def bind(self, name: str, value: Any, constant: bool = False):
        self.values[name] = value
        if constant:
            self.consts.add(name)
        else:
            self.consts.discard(name)

    def assign(self, name: str, value: Any):
        env = self
        while env is not None:
            if name in env.values:
                if name in env.consts:
                    raise ConstantReassignment(name)
                env.values[name] = value
                return
            env = env.parent
        raise UnknownVariable(name)

    def child_scope(self, bindings: Optional[Dict[str, Any]] = None) -> 'Environment':
        return Environment(self, bindings)
