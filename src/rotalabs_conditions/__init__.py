"""
rotalabs-conditions - Remote Config condition evaluation for server-side code.

Evaluates named condition trees (logical, percentage rollout and custom
signal nodes) against an evaluation context, and overlays the results onto
server templates to produce typed configs.

https://rotalabs.ai
"""

__version__ = "0.1.0"

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
from rotalabs_conditions.evaluation.evaluator import ConditionEvaluator
from rotalabs_conditions.evaluation.percent import instance_micro_percentile
from rotalabs_conditions.template import (
    ParameterValue,
    RemoteConfigParameter,
    ServerConfig,
    ServerTemplate,
    ServerTemplateData,
    Value,
    ValueSource,
    init_server_template,
)

__all__ = [
    # Version
    "__version__",
    # Conditions
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
    # Context
    "EvaluationContext",
    # Evaluation
    "ConditionEvaluator",
    "instance_micro_percentile",
    # Templates
    "ServerTemplate",
    "ServerTemplateData",
    "RemoteConfigParameter",
    "ParameterValue",
    "ServerConfig",
    "Value",
    "ValueSource",
    "init_server_template",
]
