"""
Condition evaluator for Remote Config templates.

This module evaluates named condition trees against an evaluation context:
- Logical conditions (OR, AND) with short-circuit evaluation
- Literal conditions (TRUE, FALSE)
- Percent conditions (deterministic micro-percent bucketing)
- Custom signal conditions (string, numeric and semantic version operators)

Evaluation never raises for malformed condition data. Anything that cannot
be decided evaluates to False and is logged.
"""

import logging
import operator
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from rotalabs_conditions.core.config import (
    MAX_CONDITION_RECURSION_DEPTH,
    AndCondition,
    ConditionKind,
    ConditionNode,
    CustomSignalCondition,
    CustomSignalOperator,
    NamedCondition,
    OrCondition,
    PercentCondition,
    UnknownCondition,
    parse_condition,
)
from rotalabs_conditions.core.context import EvaluationContext
from rotalabs_conditions.evaluation.comparators import (
    compare_numbers,
    compare_semantic_versions,
    compare_strings,
    string_contains,
    string_contains_regex,
    string_exactly_matches,
)
from rotalabs_conditions.evaluation.percent import evaluate_percent_condition

logger = logging.getLogger(__name__)

ContextLike = Union[EvaluationContext, Mapping[str, Any], None]


class ConditionEvaluator:
    """
    Recursive evaluator for named condition trees.

    The evaluator holds no per-call state, so one instance can be shared
    across threads.

    Examples:
        >>> evaluator = ConditionEvaluator()
        >>> conditions = [
        ...     {"name": "always", "condition": {"true": {}}},
        ...     {"name": "canada", "condition": {"customSignal": {
        ...         "customSignalOperator": "STRING_EXACTLY_MATCHES",
        ...         "customSignalKey": "country",
        ...         "targetCustomSignalValues": ["CA"],
        ...     }}},
        ... ]
        >>> evaluator.evaluate_conditions(conditions, {"country": "US"})
        {'always': True, 'canada': False}
    """

    def __init__(
        self,
        max_depth: int = MAX_CONDITION_RECURSION_DEPTH,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the condition evaluator with operator mappings.

        Args:
            max_depth: Nesting depth at which evaluation gives up with False.
            logger: Receives evaluation diagnostics (defaults to module logger).
        """
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

        # String operators: any target may match
        self.string_operators = {
            CustomSignalOperator.STRING_CONTAINS: string_contains,
            CustomSignalOperator.STRING_EXACTLY_MATCHES: string_exactly_matches,
            CustomSignalOperator.STRING_CONTAINS_REGEX: string_contains_regex,
        }

        # Numeric operators compare sign(actual - target) against zero
        self.numeric_operators = {
            CustomSignalOperator.NUMERIC_LESS_THAN: operator.lt,
            CustomSignalOperator.NUMERIC_LESS_EQUAL: operator.le,
            CustomSignalOperator.NUMERIC_EQUAL: operator.eq,
            CustomSignalOperator.NUMERIC_NOT_EQUAL: operator.ne,
            CustomSignalOperator.NUMERIC_GREATER_THAN: operator.gt,
            CustomSignalOperator.NUMERIC_GREATER_EQUAL: operator.ge,
        }

        self.semantic_version_operators = {
            CustomSignalOperator.SEMANTIC_VERSION_LESS_THAN: operator.lt,
            CustomSignalOperator.SEMANTIC_VERSION_LESS_EQUAL: operator.le,
            CustomSignalOperator.SEMANTIC_VERSION_EQUAL: operator.eq,
            CustomSignalOperator.SEMANTIC_VERSION_NOT_EQUAL: operator.ne,
            CustomSignalOperator.SEMANTIC_VERSION_GREATER_THAN: operator.gt,
            CustomSignalOperator.SEMANTIC_VERSION_GREATER_EQUAL: operator.ge,
        }

        self.logger.debug("ConditionEvaluator initialized", extra={"max_depth": max_depth})

    def evaluate_conditions(
        self,
        named_conditions: Sequence[Union[NamedCondition, Dict[str, Any]]],
        context: ContextLike = None,
    ) -> Dict[str, bool]:
        """
        Evaluate a list of named conditions.

        The order of the conditions is significant: the result preserves it,
        and later duplicates overwrite earlier results under the same name.

        Args:
            named_conditions: NamedCondition objects or their dict form
            context: EvaluationContext or a mapping of signal values

        Returns:
            Mapping of condition name to evaluation result, in input order

        Raises:
            TypeError: If named_conditions is not a list or tuple

        Examples:
            >>> evaluator = ConditionEvaluator()
            >>> evaluator.evaluate_conditions([{"name": "off", "condition": {"false": {}}}])
            {'off': False}
        """
        if not isinstance(named_conditions, (list, tuple)):
            raise TypeError(
                f"named_conditions must be a list, got {type(named_conditions).__name__}"
            )

        context = EvaluationContext.coerce(context)
        evaluated_conditions: Dict[str, bool] = {}

        for named_condition in named_conditions:
            if isinstance(named_condition, dict):
                named_condition = NamedCondition.from_dict(named_condition)
            evaluated_conditions[named_condition.name] = self.evaluate_condition(
                named_condition.condition, context
            )

        self.logger.debug(
            "Evaluated conditions",
            extra={"condition_count": len(evaluated_conditions)}
        )
        return evaluated_conditions

    def evaluate_condition(
        self,
        condition: Union[ConditionNode, Dict[str, Any]],
        context: ContextLike = None,
        depth: int = 0,
    ) -> bool:
        """
        Recursively evaluate a single condition node.

        Args:
            condition: Condition node or its dict form
            context: EvaluationContext or a mapping of signal values
            depth: Current nesting depth of this node

        Returns:
            True if the condition matches, False otherwise
        """
        if depth >= self.max_depth:
            self.logger.warning(
                "Maximum condition recursion depth exceeded",
                extra={"depth": depth, "max_depth": self.max_depth}
            )
            return False

        remaining = self.max_depth - depth
        condition = parse_condition(condition, max_depth=remaining)
        if isinstance(condition, UnknownCondition) and isinstance(condition.raw, dict):
            # Subtrees cut off when parsed with a smaller depth limit
            condition = parse_condition(condition.raw, max_depth=remaining)
        context = EvaluationContext.coerce(context)
        kind = condition.kind

        if kind == ConditionKind.OR:
            return self._evaluate_or(condition, context, depth)

        elif kind == ConditionKind.AND:
            return self._evaluate_and(condition, context, depth)

        elif kind == ConditionKind.TRUE:
            return True

        elif kind == ConditionKind.FALSE:
            return False

        elif kind == ConditionKind.PERCENT:
            return self._evaluate_percent(condition, context)

        elif kind == ConditionKind.CUSTOM_SIGNAL:
            return self._evaluate_custom_signal(condition, context)

        self.logger.warning("Unknown condition type encountered")
        return False

    def _evaluate_or(self, or_condition: OrCondition, context: EvaluationContext, depth: int) -> bool:
        # Short-circuit: stop at first True
        for sub in or_condition.conditions:
            if self.evaluate_condition(sub, context, depth + 1):
                return True
        return False

    def _evaluate_and(self, and_condition: AndCondition, context: EvaluationContext, depth: int) -> bool:
        # Short-circuit: stop at first False
        for sub in and_condition.conditions:
            if not self.evaluate_condition(sub, context, depth + 1):
                return False
        return True

    def _evaluate_percent(self, percent_condition: PercentCondition, context: EvaluationContext) -> bool:
        return evaluate_percent_condition(
            percent_condition, context.randomization_id, log=self.logger
        )

    def _evaluate_custom_signal(
        self,
        custom_signal_condition: CustomSignalCondition,
        context: EvaluationContext,
    ) -> bool:
        """
        Evaluate a custom signal condition against the context.

        String operators match if any target matches. Numeric and semantic
        version operators only consider the first target.

        Args:
            custom_signal_condition: Condition to evaluate
            context: Evaluation context holding the signal

        Returns:
            True if the signal satisfies the operator, False otherwise
        """
        op = custom_signal_condition.custom_signal_operator
        key = custom_signal_condition.custom_signal_key
        targets: List[str] = custom_signal_condition.target_custom_signal_values

        # A key that is not a string is treated as missing.
        if not op or not isinstance(key, str) or not key or not targets:
            self.logger.warning(
                "Missing operator, key, or target values for custom signal condition",
                extra={"signal_key": repr(key)}
            )
            return False

        actual = context.get(key)
        if actual is None:
            self.logger.debug(
                "Custom signal value not found in context",
                extra={"signal_key": key}
            )
            return False

        if op in self.string_operators:
            return compare_strings(targets, actual, self.string_operators[op])

        elif op == CustomSignalOperator.STRING_DOES_NOT_CONTAIN:
            return not compare_strings(targets, actual, string_contains)

        elif op in self.numeric_operators:
            op_func = self.numeric_operators[op]
            return compare_numbers(actual, targets[0], lambda r: op_func(r, 0))

        elif op in self.semantic_version_operators:
            op_func = self.semantic_version_operators[op]
            return compare_semantic_versions(actual, targets[0], lambda r: op_func(r, 0))

        self.logger.warning(
            "Unknown custom signal operator",
            extra={"operator": op.value, "signal_key": key}
        )
        return False
