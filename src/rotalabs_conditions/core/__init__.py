"""Core module for rotalabs-conditions.

This module provides the condition tree model and the evaluation context.
"""

from rotalabs_conditions.core.config import (
    MAX_CONDITION_RECURSION_DEPTH,
    AndCondition,
    ConditionKind,
    ConditionNode,
    CustomSignalCondition,
    CustomSignalOperator,
    FalseCondition,
    MicroPercentRange,
    NamedCondition,
    OrCondition,
    PercentCondition,
    PercentConditionOperator,
    TrueCondition,
    UnknownCondition,
    parse_condition,
)
from rotalabs_conditions.core.context import EvaluationContext

__all__ = [
    "MAX_CONDITION_RECURSION_DEPTH",
    "ConditionKind",
    "ConditionNode",
    "OrCondition",
    "AndCondition",
    "TrueCondition",
    "FalseCondition",
    "PercentCondition",
    "PercentConditionOperator",
    "MicroPercentRange",
    "CustomSignalCondition",
    "CustomSignalOperator",
    "UnknownCondition",
    "NamedCondition",
    "parse_condition",
    "EvaluationContext",
]
