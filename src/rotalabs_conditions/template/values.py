"""Typed config values produced by evaluating a server template."""

from enum import Enum
from typing import Any, Dict, Optional


class ValueSource(str, Enum):
    """Where a config value came from."""

    # No value anywhere: typed accessors return their static defaults
    STATIC = "static"
    # From the in-app default config passed to the template
    DEFAULT = "default"
    # From the evaluated template
    REMOTE = "remote"


class Value:
    """A config value with its source.

    Remote Config stores every value as a string; the ``as_*`` accessors
    convert it, falling back to a type default when conversion fails.

    Uses __slots__ for memory efficiency.
    """

    __slots__ = ("source", "value")

    DEFAULT_VALUE_FOR_BOOLEAN = False
    DEFAULT_VALUE_FOR_STRING = ""
    DEFAULT_VALUE_FOR_INTEGER = 0
    DEFAULT_VALUE_FOR_FLOAT_NUMBER = 0.0
    BOOLEAN_TRUTHY_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})

    def __init__(self, source: ValueSource, value: str = DEFAULT_VALUE_FOR_STRING):
        self.source = ValueSource(source)
        self.value = value

    def as_string(self) -> str:
        """Returns the value as a string."""
        if self.source == ValueSource.STATIC:
            return self.DEFAULT_VALUE_FOR_STRING
        return str(self.value)

    def as_boolean(self) -> bool:
        """Returns the value as a boolean."""
        if self.source == ValueSource.STATIC:
            return self.DEFAULT_VALUE_FOR_BOOLEAN
        return str(self.value).strip().lower() in self.BOOLEAN_TRUTHY_VALUES

    def as_int(self) -> int:
        """Returns the value as an integer."""
        if self.source == ValueSource.STATIC:
            return self.DEFAULT_VALUE_FOR_INTEGER
        try:
            return int(self.value)
        except (TypeError, ValueError):
            return self.DEFAULT_VALUE_FOR_INTEGER

    def as_float(self) -> float:
        """Returns the value as a float."""
        if self.source == ValueSource.STATIC:
            return self.DEFAULT_VALUE_FOR_FLOAT_NUMBER
        try:
            return float(self.value)
        except (TypeError, ValueError):
            return self.DEFAULT_VALUE_FOR_FLOAT_NUMBER

    def get_source(self) -> ValueSource:
        """Returns the source of the value."""
        return self.source

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.source == other.source and self.value == other.value

    def __repr__(self) -> str:
        return f"Value(source={self.source.value!r}, value={self.value!r})"


class ServerConfig:
    """Config produced by evaluating a server template.

    Keys absent from both the template and the default config read as
    static defaults.
    """

    def __init__(self, config_values: Optional[Dict[str, Value]] = None):
        self._config_values = dict(config_values or {})

    def get_boolean(self, key: str) -> bool:
        """Returns the value as a boolean."""
        return self.get_value(key).as_boolean()

    def get_string(self, key: str) -> str:
        """Returns the value as a string."""
        return self.get_value(key).as_string()

    def get_int(self, key: str) -> int:
        """Returns the value as an integer."""
        return self.get_value(key).as_int()

    def get_float(self, key: str) -> float:
        """Returns the value as a float."""
        return self.get_value(key).as_float()

    def get_value_source(self, key: str) -> ValueSource:
        """Returns the source of the value."""
        return self.get_value(key).get_source()

    def get_value(self, key: str) -> Value:
        return self._config_values.get(key, Value(ValueSource.STATIC))

    def get_all(self) -> Dict[str, Value]:
        """Returns a copy of every known value keyed by parameter."""
        return dict(self._config_values)

    def __repr__(self) -> str:
        return f"ServerConfig(keys={sorted(self._config_values)!r})"
