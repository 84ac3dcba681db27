"""
LayerNet Parameter Store Module

This module implements the ParameterStore, a case-insensitive key/value map
holding the configuration of activation functions and the hyperparameters of
a network.

Values are kept in their persisted string form; typed reads go through a
cache of parsed values that is invalidated whenever a key is set or removed.

Classes:
    ParameterStore: Typed, case-insensitive parameter map
"""

from typing import Any

from layernet.parameters.named_parameter import NamedParameter, Range
from layernet.parameters.keys import find_parameter

class ParameterStore:
    """
    Case-insensitive map from parameter key to value.

    Keys of registered parameters are read/written through a NamedParameter
    descriptor; free-form user keys are stored under the 'User.' prefix so
    that they can never shadow a registered key.

    Public Methods:
        get(param):                                 Typed value, or the descriptor default
        set(param, value):                          Store a value of the descriptor type
        remove(param):                              Remove the stored value (get() reverts to the default)
        set_raw(key, text):                         Store a value given in string form
        get_user(key, data_type, default):          Read a user key
        set_user(key, value):                       Write a user key
        remove_user(key):                           Remove a user key
        keys():                                     Stored keys (lowercase)
        copy():                                     Independent copy
        to_dict():                                  Mapping of stored key to string value
        from_dict(mapping):                         Build a store from to_dict() output
    """

    USER_PREFIX = "User."

    def __init__(self, values: dict[str, Any] | None = None):
        self._values: dict[str, str] = {}
        self._cache:  dict[str, Any] = {}
        if values:
            for key, value in values.items():
                self.set_raw(key, value if isinstance(value, str) else ParameterStore._format(value))

    @staticmethod
    def _format(value: Any) -> str:
        if isinstance(value, Range):
            return str(value)
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, float):
            return repr(value)
        return str(value)

    @staticmethod
    def _parse(text: str, data_type: type) -> Any:
        """
        Convert the string form of a value to 'data_type'.

        Raises:
            ValueError: if 'text' cannot be converted
        """
        if data_type is Range:
            return Range.parse(text)
        if data_type is bool:
            lowered = text.strip().lower()
            if lowered in ('true', '1', 'yes', 'on'):
                return True
            if lowered in ('false', '0', 'no', 'off'):
                return False
            raise ValueError(f"Invalid boolean value: '{text}'")
        if data_type is int:
            return int(text)
        return float(text)

    @staticmethod
    def _check_type(param: NamedParameter, value: Any):
        data_type = param.data_type
        if data_type is float:
            valid = isinstance(value, (int, float)) and not isinstance(value, bool)
        elif data_type is int:
            valid = isinstance(value, int) and not isinstance(value, bool)
        else:
            valid = isinstance(value, data_type)
        if not valid:
            raise TypeError(f"Parameter '{param.key}' expects {data_type.__name__}, "
                            f"got {type(value).__name__}")

    # ----- registered parameters

    def get(self, param: NamedParameter) -> Any:
        key = param.key.lower()
        if key in self._cache:
            return self._cache[key]
        if key not in self._values:
            return param.default

        value = ParameterStore._parse(self._values[key], param.data_type)
        self._cache[key] = value
        return value

    def set(self, param: NamedParameter, value: Any):
        """
        Store a value.

        Parameters:
            param: the parameter descriptor
            value: a value of the descriptor's declared type (ints are accepted for floats)

        Raises:
            TypeError: if 'value' does not match the declared type
        """
        ParameterStore._check_type(param, value)
        if param.data_type is float:
            value = float(value)
        key = param.key.lower()
        self._values[key] = ParameterStore._format(value)
        self._cache[key]  = value

    def remove(self, param: NamedParameter):
        key = param.key.lower()
        self._values.pop(key, None)
        self._cache.pop(key, None)

    def set_raw(self, key: str, text: str):
        """
        Store a value given in string form, e.g. as read from a configuration file.

        Registered keys are validated against their descriptor, keys carrying
        the 'User.' prefix are stored as-is.

        Parameters:
            key:  parameter key, any letter case
            text: string form of the value

        Raises:
            KeyError:   if 'key' is neither registered nor a user key
            ValueError: if 'text' is not valid for the registered type
        """
        lowered = key.lower()
        if lowered.startswith(ParameterStore.USER_PREFIX.lower()):
            self._values[lowered] = text
            self._cache.pop(lowered, None)
            return

        param = find_parameter(key)
        if param is None:
            raise KeyError(f"Unknown parameter '{key}'")
        value = ParameterStore._parse(text, param.data_type)
        self._values[lowered] = text
        self._cache[lowered]  = value

    # ----- user parameters

    def _user_key(self, key: str) -> str:
        return (ParameterStore.USER_PREFIX + key).lower()

    def get_user(self, key: str, data_type: type = str, default: Any = None) -> Any:
        text = self._values.get(self._user_key(key))
        if text is None:
            return default
        if data_type is str:
            return text
        return ParameterStore._parse(text, data_type)

    def set_user(self, key: str, value: Any):
        self._values[self._user_key(key)] = value if isinstance(value, str) else ParameterStore._format(value)

    def remove_user(self, key: str):
        self._values.pop(self._user_key(key), None)

    # ----- container protocol

    def keys(self) -> list[str]:
        return list(self._values.keys())

    def __contains__(self, item) -> bool:
        key = item.key if isinstance(item, NamedParameter) else item
        return key.lower() in self._values

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, ParameterStore):
            return NotImplemented
        return self._values == other._values

    def __repr__(self):
        return f"ParameterStore({self._values!r})"

    def copy(self) -> 'ParameterStore':
        clone = ParameterStore()
        clone._values = dict(self._values)
        return clone

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)

    @classmethod
    def from_dict(cls, mapping: dict[str, str]) -> 'ParameterStore':
        """
        Build a store from the output of 'to_dict()'.

        Keys that are not registered and carry no user prefix are kept
        verbatim (values written by a newer version), but are never parsed.
        """
        store = cls()
        for key, text in mapping.items():
            if not isinstance(text, str):
                text = ParameterStore._format(text)
            try:
                store.set_raw(key, text)
            except KeyError:
                store._values[key.lower()] = text
        return store
