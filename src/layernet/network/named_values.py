"""
LayerNet Named Values Module

This module implements NamedValues, the alias-keyed map used by the named
forward and train entry points.

Classes:
    NamedValues: Case-insensitive map from alias to value
"""

from enum   import Enum
from typing import Iterator

class NamedValues:
    """
    An insertion-ordered map from alias to float.

    Keys are matched case-insensitively; enum members are accepted as keys
    and stand for their name. The letter case of the first insertion is kept
    for display.

    Public Methods:
        set(key, value):            Store a value
        get(key, default):          Read a value (KeyError if missing and no default)
        set_if_less(key, value):    Store 'value' if the key is missing or holds a larger value
        set_if_greater(key, value): Store 'value' if the key is missing or holds a smaller value
        max():                      (key, value) pair with the largest value
        min():                      (key, value) pair with the smallest value
        keys():                     Keys, in insertion order
        to_list():                  Values, in insertion order
        items():                    (key, value) pairs, in insertion order
    """

    _MISSING = object()

    def __init__(self, values=None):
        self._values: dict[str, float] = {}
        self._names : dict[str, str]   = {}
        if values is not None:
            items = values.items() if hasattr(values, 'items') else values
            for key, value in items:
                self.set(key, value)

    @staticmethod
    def _name(key: 'str | Enum') -> str:
        if isinstance(key, Enum):
            return key.name
        if not isinstance(key, str):
            raise TypeError(f"Named value keys must be strings or enum members, got {type(key).__name__}")
        return key

    def set(self, key: 'str | Enum', value: float) -> None:
        name = NamedValues._name(key)
        lowered = name.lower()
        self._names.setdefault(lowered, name)
        self._values[lowered] = float(value)

    def get(self, key: 'str | Enum', default=_MISSING) -> float:
        lowered = NamedValues._name(key).lower()
        if lowered in self._values:
            return self._values[lowered]
        if default is NamedValues._MISSING:
            raise KeyError(key)
        return default

    def set_if_less(self, key: 'str | Enum', value: float) -> None:
        current = self.get(key, None)
        if current is None or value < current:
            self.set(key, value)

    def set_if_greater(self, key: 'str | Enum', value: float) -> None:
        current = self.get(key, None)
        if current is None or value > current:
            self.set(key, value)

    def max(self) -> tuple[str, float]:
        if not self._values:
            raise ValueError("max() of empty NamedValues")
        lowered = max(self._values, key=self._values.get)
        return self._names[lowered], self._values[lowered]

    def min(self) -> tuple[str, float]:
        if not self._values:
            raise ValueError("min() of empty NamedValues")
        lowered = min(self._values, key=self._values.get)
        return self._names[lowered], self._values[lowered]

    def keys(self) -> list[str]:
        return [self._names[lowered] for lowered in self._values]

    def to_list(self) -> list[float]:
        return list(self._values.values())

    def items(self) -> list[tuple[str, float]]:
        return [(self._names[lowered], value) for lowered, value in self._values.items()]

    def __getitem__(self, key: 'str | Enum') -> float:
        return self.get(key)

    def __setitem__(self, key: 'str | Enum', value: float):
        self.set(key, value)

    def __contains__(self, key) -> bool:
        try:
            return NamedValues._name(key).lower() in self._values
        except TypeError:
            return False

    def __len__(self):
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __eq__(self, other):
        if not isinstance(other, NamedValues):
            return NotImplemented
        return self._values == other._values

    def __repr__(self):
        return f"NamedValues({dict(self.items())!r})"
