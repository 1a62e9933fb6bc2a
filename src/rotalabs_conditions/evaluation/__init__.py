"""
Evaluation module for rotalabs-conditions.

This module provides condition evaluation, percentage bucketing and the
typed comparators used by custom signal conditions.
"""

from rotalabs_conditions.evaluation.evaluator import ConditionEvaluator
from rotalabs_conditions.evaluation.percent import instance_micro_percentile

__all__ = ["ConditionEvaluator", "instance_micro_percentile"]
