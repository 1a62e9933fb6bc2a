"""Pytest fixtures for rotalabs-conditions tests.

This module provides reusable fixtures for testing condition evaluation and
server templates.
"""

import pytest
from typing import Any, Dict, List, Optional

from rotalabs_conditions.core.config import AndCondition, ConditionNode, TrueCondition
from rotalabs_conditions.core.context import EvaluationContext
from rotalabs_conditions.evaluation.evaluator import ConditionEvaluator


@pytest.fixture
def evaluator() -> ConditionEvaluator:
    """Create a condition evaluator with the default recursion limit."""
    return ConditionEvaluator()


@pytest.fixture
def context() -> EvaluationContext:
    """Create an evaluation context with typical client signals."""
    return EvaluationContext(
        {
            "randomization_id": "user-42",
            "platform": "ios",
            "app_version": "2.4.1",
            "country": "CA",
            "purchases": 3,
        }
    )


@pytest.fixture
def custom_signal():
    """Factory fixture for custom signal condition dicts.

    Example:
        condition = custom_signal("NUMERIC_EQUAL", "purchases", ["3"])
    """
    def _create(
        operator: Optional[str],
        key: Optional[str],
        targets: Optional[List[str]],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if operator is not None:
            body["customSignalOperator"] = operator
        if key is not None:
            body["customSignalKey"] = key
        if targets is not None:
            body["targetCustomSignalValues"] = targets
        return {"customSignal": body}

    return _create


@pytest.fixture
def nested_and():
    """Factory fixture wrapping a leaf in ``levels`` AND conditions.

    The leaf of ``nested_and(n)`` sits at depth n.
    """
    def _create(levels: int, leaf: Optional[ConditionNode] = None) -> ConditionNode:
        node = leaf if leaf is not None else TrueCondition()
        for _ in range(levels):
            node = AndCondition(conditions=[node])
        return node

    return _create


@pytest.fixture
def template_data() -> Dict[str, Any]:
    """Create a server template in its JSON dictionary form.

    Conditions:
        - ios: platform is exactly "ios"
        - everyone: always true
    """
    return {
        "conditions": [
            {
                "name": "ios",
                "condition": {
                    "customSignal": {
                        "customSignalOperator": "STRING_EXACTLY_MATCHES",
                        "customSignalKey": "platform",
                        "targetCustomSignalValues": ["ios"],
                    }
                },
            },
            {"name": "everyone", "condition": {"true": {}}},
        ],
        "parameters": {
            "welcome_message": {
                "defaultValue": {"value": "hello"},
                "conditionalValues": {"ios": {"value": "hello ios"}},
            },
            "dark_mode": {
                "defaultValue": {"value": "false"},
                "conditionalValues": {
                    "ios": {"value": "true"},
                    "everyone": {"value": "false"},
                },
            },
            "max_items": {
                "defaultValue": {"useInAppDefault": True},
            },
            "ios_only": {
                "conditionalValues": {"ios": {"value": "1.5"}},
            },
        },
        "version": {"versionNumber": "7"},
        "etag": "etag-123",
    }
