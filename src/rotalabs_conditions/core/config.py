"""Condition definitions for Remote Config evaluation.

This module defines the typed condition tree evaluated by the
ConditionEvaluator: logical nodes (OR/AND), literal leaves (TRUE/FALSE),
percentage rollout nodes and custom signal comparisons.

Condition data normally arrives as the deserialized JSON form of a
template. ``parse_condition`` maps that form onto the node dataclasses
without raising: anything it cannot recognise becomes an
``UnknownCondition``, which always evaluates to False.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Condition trees deeper than this evaluate to False.
MAX_CONDITION_RECURSION_DEPTH = 10

# 100% expressed in micro-percent units.
MICRO_PERCENT_MAX = 100 * 1_000_000


class ConditionKind(str, Enum):
    """Discriminant for the condition node variants."""

    OR = "orCondition"
    AND = "andCondition"
    TRUE = "true"
    FALSE = "false"
    PERCENT = "percent"
    CUSTOM_SIGNAL = "customSignal"
    UNKNOWN = "unknown"


class PercentConditionOperator(str, Enum):
    """Operators for percent conditions."""

    LESS_OR_EQUAL = "LESS_OR_EQUAL"
    GREATER_THAN = "GREATER_THAN"
    BETWEEN = "BETWEEN"
    UNKNOWN = "UNKNOWN"


class CustomSignalOperator(str, Enum):
    """Operators for custom signal conditions."""

    # String operators (any target may match)
    STRING_CONTAINS = "STRING_CONTAINS"
    STRING_DOES_NOT_CONTAIN = "STRING_DOES_NOT_CONTAIN"
    STRING_EXACTLY_MATCHES = "STRING_EXACTLY_MATCHES"
    STRING_CONTAINS_REGEX = "STRING_CONTAINS_REGEX"

    # Numeric operators (first target only)
    NUMERIC_LESS_THAN = "NUMERIC_LESS_THAN"
    NUMERIC_LESS_EQUAL = "NUMERIC_LESS_EQUAL"
    NUMERIC_EQUAL = "NUMERIC_EQUAL"
    NUMERIC_NOT_EQUAL = "NUMERIC_NOT_EQUAL"
    NUMERIC_GREATER_THAN = "NUMERIC_GREATER_THAN"
    NUMERIC_GREATER_EQUAL = "NUMERIC_GREATER_EQUAL"

    # Semantic version operators (first target only)
    SEMANTIC_VERSION_LESS_THAN = "SEMANTIC_VERSION_LESS_THAN"
    SEMANTIC_VERSION_LESS_EQUAL = "SEMANTIC_VERSION_LESS_EQUAL"
    SEMANTIC_VERSION_EQUAL = "SEMANTIC_VERSION_EQUAL"
    SEMANTIC_VERSION_NOT_EQUAL = "SEMANTIC_VERSION_NOT_EQUAL"
    SEMANTIC_VERSION_GREATER_THAN = "SEMANTIC_VERSION_GREATER_THAN"
    SEMANTIC_VERSION_GREATER_EQUAL = "SEMANTIC_VERSION_GREATER_EQUAL"

    UNKNOWN = "UNKNOWN"


def _parse_operator(enum_cls, value):
    """Map a raw operator onto ``enum_cls``.

    None stays None (operator missing); unrecognised values become UNKNOWN.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return enum_cls.UNKNOWN


@dataclass
class OrCondition:
    """True if any nested condition is true.

    Attributes:
        conditions: Nested conditions, evaluated left to right.
    """

    conditions: List["ConditionNode"] = field(default_factory=list)

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.OR

    def to_dict(self) -> Dict[str, Any]:
        """Convert condition to dictionary."""
        return {"orCondition": {"conditions": [c.to_dict() for c in self.conditions]}}


@dataclass
class AndCondition:
    """True if every nested condition is true.

    Attributes:
        conditions: Nested conditions, evaluated left to right.
    """

    conditions: List["ConditionNode"] = field(default_factory=list)

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.AND

    def to_dict(self) -> Dict[str, Any]:
        """Convert condition to dictionary."""
        return {"andCondition": {"conditions": [c.to_dict() for c in self.conditions]}}


@dataclass
class TrueCondition:
    """Literal true leaf."""

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.TRUE

    def to_dict(self) -> Dict[str, Any]:
        return {"true": {}}


@dataclass
class FalseCondition:
    """Literal false leaf."""

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.FALSE

    def to_dict(self) -> Dict[str, Any]:
        return {"false": {}}


@dataclass
class MicroPercentRange:
    """Half-open micro-percent range used by the BETWEEN operator.

    Attributes:
        micro_percent_lower_bound: Exclusive lower bound.
        micro_percent_upper_bound: Inclusive upper bound.
    """

    micro_percent_lower_bound: Optional[int] = None
    micro_percent_upper_bound: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert range to dictionary."""
        result = {}
        if self.micro_percent_lower_bound is not None:
            result["microPercentLowerBound"] = self.micro_percent_lower_bound
        if self.micro_percent_upper_bound is not None:
            result["microPercentUpperBound"] = self.micro_percent_upper_bound
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MicroPercentRange":
        """Create range from dictionary."""
        return cls(
            micro_percent_lower_bound=data.get("microPercentLowerBound"),
            micro_percent_upper_bound=data.get("microPercentUpperBound"),
        )


@dataclass
class PercentCondition:
    """Percentage rollout condition.

    Buckets the context's randomization id (optionally prefixed by a seed)
    into [0, 100_000_000) micro-percent and compares the bucket against
    ``micro_percent`` or ``micro_percent_range``.

    Attributes:
        percent_operator: Comparison to apply; None when absent.
        seed: Optional seed that namespaces the bucketing.
        micro_percent: Threshold for LESS_OR_EQUAL and GREATER_THAN.
        micro_percent_range: Bounds for BETWEEN.
    """

    percent_operator: Optional[PercentConditionOperator] = None
    seed: Optional[str] = None
    micro_percent: Optional[int] = None
    micro_percent_range: Optional[MicroPercentRange] = None

    def __post_init__(self):
        self.percent_operator = _parse_operator(PercentConditionOperator, self.percent_operator)

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.PERCENT

    def to_dict(self) -> Dict[str, Any]:
        """Convert condition to dictionary."""
        result = {}
        if self.percent_operator is not None:
            result["percentOperator"] = self.percent_operator.value
        if self.seed is not None:
            result["seed"] = self.seed
        if self.micro_percent is not None:
            result["microPercent"] = self.micro_percent
        if self.micro_percent_range is not None:
            result["microPercentRange"] = self.micro_percent_range.to_dict()
        return {"percent": result}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PercentCondition":
        """Create condition from the body of a ``percent`` node."""
        micro_percent_range = data.get("microPercentRange")
        if isinstance(micro_percent_range, dict):
            micro_percent_range = MicroPercentRange.from_dict(micro_percent_range)
        else:
            micro_percent_range = None

        return cls(
            percent_operator=data.get("percentOperator"),
            seed=data.get("seed"),
            micro_percent=data.get("microPercent"),
            micro_percent_range=micro_percent_range,
        )


@dataclass
class CustomSignalCondition:
    """Comparison between a context signal and target values.

    Attributes:
        custom_signal_operator: Comparison to apply; None when absent.
        custom_signal_key: Context key holding the actual value.
        target_custom_signal_values: Values to compare against.
    """

    custom_signal_operator: Optional[CustomSignalOperator] = None
    custom_signal_key: Optional[str] = None
    target_custom_signal_values: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.custom_signal_operator = _parse_operator(CustomSignalOperator, self.custom_signal_operator)
        if self.target_custom_signal_values is None:
            self.target_custom_signal_values = []

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.CUSTOM_SIGNAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert condition to dictionary."""
        result = {}
        if self.custom_signal_operator is not None:
            result["customSignalOperator"] = self.custom_signal_operator.value
        if self.custom_signal_key is not None:
            result["customSignalKey"] = self.custom_signal_key
        if self.target_custom_signal_values:
            result["targetCustomSignalValues"] = list(self.target_custom_signal_values)
        return {"customSignal": result}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomSignalCondition":
        """Create condition from the body of a ``customSignal`` node."""
        targets = data.get("targetCustomSignalValues")
        if not isinstance(targets, (list, tuple)):
            targets = []

        return cls(
            custom_signal_operator=data.get("customSignalOperator"),
            custom_signal_key=data.get("customSignalKey"),
            target_custom_signal_values=[str(t) for t in targets],
        )


@dataclass
class UnknownCondition:
    """A node with no recognised variant. Always evaluates to False.

    Attributes:
        raw: The original data, kept for diagnostics.
    """

    raw: Any = None

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw) if isinstance(self.raw, dict) else {}


ConditionNode = Union[
    OrCondition,
    AndCondition,
    TrueCondition,
    FalseCondition,
    PercentCondition,
    CustomSignalCondition,
    UnknownCondition,
]

_NODE_TYPES = (
    OrCondition,
    AndCondition,
    TrueCondition,
    FalseCondition,
    PercentCondition,
    CustomSignalCondition,
    UnknownCondition,
)


def _parse_children(body: Any, depth: int, max_depth: int) -> List[ConditionNode]:
    conditions = body.get("conditions") if isinstance(body, dict) else None
    if not isinstance(conditions, (list, tuple)):
        return []
    return [parse_condition(c, depth + 1, max_depth) for c in conditions]


def parse_condition(
    data: Any,
    depth: int = 0,
    max_depth: int = MAX_CONDITION_RECURSION_DEPTH,
) -> ConditionNode:
    """Create a condition node from its dictionary form.

    Variant keys are checked in a fixed priority (orCondition, andCondition,
    true, false, percent, customSignal); the first key holding a non-None
    value decides the variant. Never raises for malformed input.

    Parsing stops at ``max_depth``: a node at that depth is kept as an
    ``UnknownCondition`` holding its raw data, matching the evaluator,
    which never looks below that depth. Deep or self-referencing data
    therefore cannot exhaust the stack.

    Args:
        data: Condition dictionary, or an already-typed node.
        depth: Depth of ``data`` within the tree being parsed.
        max_depth: Depth at which parsing stops.

    Returns:
        Parsed condition node.

    Examples:
        >>> parse_condition({"true": {}})
        TrueCondition()
        >>> parse_condition({"bogus": 1}).kind
        <ConditionKind.UNKNOWN: 'unknown'>
    """
    if isinstance(data, _NODE_TYPES):
        return data
    if not isinstance(data, dict) or depth >= max_depth:
        return UnknownCondition(raw=data)

    if data.get("orCondition") is not None:
        return OrCondition(conditions=_parse_children(data["orCondition"], depth, max_depth))
    if data.get("andCondition") is not None:
        return AndCondition(conditions=_parse_children(data["andCondition"], depth, max_depth))
    if data.get("true") is not None:
        return TrueCondition()
    if data.get("false") is not None:
        return FalseCondition()
    if data.get("percent") is not None:
        body = data["percent"]
        if isinstance(body, dict):
            return PercentCondition.from_dict(body)
    elif data.get("customSignal") is not None:
        body = data["customSignal"]
        if isinstance(body, dict):
            return CustomSignalCondition.from_dict(body)

    return UnknownCondition(raw=data)


@dataclass
class NamedCondition:
    """A condition tree with a unique name.

    Attributes:
        name: Condition name, referenced by parameter conditional values.
        condition: Root of the condition tree.
    """

    name: str
    condition: ConditionNode

    def __post_init__(self):
        """Validate named condition."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Condition name must be a non-empty string")
        self.condition = parse_condition(self.condition)

    def to_dict(self) -> Dict[str, Any]:
        """Convert named condition to dictionary."""
        return {"name": self.name, "condition": self.condition.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamedCondition":
        """Create named condition from dictionary."""
        return cls(name=data.get("name"), condition=data.get("condition"))
