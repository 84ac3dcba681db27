"""
LayerNet Named Parameter Module

This module implements the descriptors used to read and write typed values in
a ParameterStore.

Classes:
    Range:          A numeric (min, max) pair with a compact string form
    NamedParameter: Descriptor of a parameter (key, declared type, default value)
"""

from typing import Any

class Range:
    """
    A numeric range, e.g. the output bounds of the Linear activation.

    Ranges are immutable.
    The compact string form is '$[min,max]', which is how ranges are kept in a
    ParameterStore and persisted.

    Public Properties:
        min:    lower bound
        max:    upper bound
        length: max - min
    """

    __slots__ = ('_min', '_max')

    _PREFIX = "$["
    _SUFFIX = "]"

    def __init__(self, min: float, max: float):
        object.__setattr__(self, '_min', float(min))
        object.__setattr__(self, '_max', float(max))

    def __setattr__(self, name, value):
        raise AttributeError(f"Range is immutable, cannot set '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"Range is immutable, cannot delete '{name}'")

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    @property
    def length(self) -> float:
        return self.max - self.min

    def to_list(self) -> list[float]:
        return [self.min, self.max]

    @classmethod
    def parse(cls, text: str) -> 'Range':
        """
        Parse the compact string form.

        Parameters:
            text: a string such as '$[-1.0,1.0]'

        Returns:
            the parsed Range

        Raises:
            ValueError: if 'text' is not a valid range
        """
        result = cls.try_parse(text)
        if result is None:
            raise ValueError(f"Invalid range format: '{text}'")
        return result

    @classmethod
    def try_parse(cls, text: str) -> 'Range | None':
        """Parse the compact string form, returning None if it is malformed."""
        if not isinstance(text, str):
            return None
        text = text.strip()
        if not (text.startswith(cls._PREFIX) and text.endswith(cls._SUFFIX)):
            return None
        parts = text[len(cls._PREFIX):-len(cls._SUFFIX)].split(',')
        if len(parts) != 2:
            return None
        try:
            return cls(float(parts[0]), float(parts[1]))
        except ValueError:
            return None

    def __eq__(self, other):
        if not isinstance(other, Range):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    def __hash__(self):
        return hash((self.min, self.max))

    def __str__(self):
        return f"{self._PREFIX}{self.min!r},{self.max!r}{self._SUFFIX}"

    def __repr__(self):
        return f"Range(min={self.min!r}, max={self.max!r})"

class NamedParameter:
    """
    Descriptor of a typed parameter.

    Public Attributes:
        key:       parameter name (matched case-insensitively by the store)
        data_type: one of float, int, bool, Range
        default:   value returned when the store holds no value for 'key'
    """

    SUPPORTED_TYPES = (float, int, bool, Range)

    def __init__(self, key: str, data_type: type, default: Any):
        if data_type not in NamedParameter.SUPPORTED_TYPES:
            raise TypeError(f"Unsupported parameter type '{data_type.__name__}' for '{key}'")
        self.key       = key
        self.data_type = data_type
        self.default   = default

    def __repr__(self):
        return f"NamedParameter(key={self.key!r}, data_type={self.data_type.__name__}, default={self.default!r})"
