"""Evaluation context for condition evaluation.

The context is the caller-supplied input for one evaluation call: a map of
custom signal values plus the randomization id used for percent bucketing.

Supports both:
- Flat dictionary input: {"randomization_id": "user-42", "app_version": "1.2.3"}
- Explicit id: EvaluationContext({"app_version": "1.2.3"}, randomization_id="user-42")
"""

from typing import Any, Dict, Iterator, Mapping, Optional, Union

RANDOMIZATION_ID_KEY = "randomization_id"

SignalValue = Union[str, int, float]


class EvaluationContext:
    """Read-only view over the signals used to evaluate conditions.

    Uses __slots__ for memory efficiency and a zero-copy reference to the
    input mapping.

    Attributes:
        _data: Reference to the input signals (zero-copy).
        _randomization_id: Identifier hashed by percent conditions.
    """

    __slots__ = ("_data", "_randomization_id")

    def __init__(
        self,
        data: Optional[Mapping[str, SignalValue]] = None,
        randomization_id: Optional[str] = None,
    ):
        """Initialize evaluation context.

        Args:
            data: Custom signal values keyed by signal name.
            randomization_id: Stable per-user identifier. Falls back to the
                ``randomization_id`` key of ``data`` when not given.

        Examples:
            ctx = EvaluationContext({"randomization_id": "user-42"})
            ctx = EvaluationContext({"country": "CA"}, randomization_id="user-42")
        """
        self._data = data if data is not None else {}
        if randomization_id is None:
            randomization_id = self._data.get(RANDOMIZATION_ID_KEY)
        self._randomization_id = randomization_id

    @classmethod
    def coerce(cls, context: Union[None, "EvaluationContext", Mapping[str, Any]]) -> "EvaluationContext":
        """Return ``context`` as an EvaluationContext.

        Raises:
            TypeError: If context is neither None, a mapping nor a context.
        """
        if isinstance(context, cls):
            return context
        if context is None:
            return cls()
        if isinstance(context, Mapping):
            return cls(context)
        raise TypeError(f"Evaluation context must be a mapping, got {type(context).__name__}")

    @property
    def data(self) -> Mapping[str, SignalValue]:
        """Get reference to input signals."""
        return self._data

    @property
    def randomization_id(self) -> Optional[str]:
        """Get the randomization id, if any."""
        return self._randomization_id

    def get(self, key: str, default: Any = None) -> Any:
        """Get a signal value by key.

        Args:
            key: Signal name.
            default: Value returned when the signal is absent.

        Returns:
            Signal value or default.
        """
        return self._data.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to a plain dictionary."""
        result = dict(self._data)
        if self._randomization_id is not None:
            result[RANDOMIZATION_ID_KEY] = self._randomization_id
        return result

    def __repr__(self) -> str:
        return f"EvaluationContext(randomization_id={self._randomization_id!r}, signals={len(self._data)})"
