"""Typed comparators for custom signal conditions.

String comparators match if any target satisfies the predicate. Numeric
and semantic version comparators reduce the comparison to -1, 0 or 1 and
hand it to a predicate; a value that cannot be coerced compares as False.
"""

import logging
import math
import re
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

SignalValue = Union[str, int, float]
ResultPredicate = Callable[[int], bool]

# Decimal literals as JavaScript's Number() reads them (hex excepted).
_NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_VERSION_SEGMENT_PATTERN = re.compile(r"[+-]?[0-9]+")


@lru_cache(maxsize=128)
def compile_expression(expression: str) -> Optional[re.Pattern]:
    """
    Compile and cache a regex expression.

    Args:
        expression: Regex pattern string

    Returns:
        Compiled regex pattern or None if invalid
    """
    try:
        return re.compile(expression)
    except re.error as e:
        logger.error(
            "Failed to compile regex expression",
            extra={"expression": expression, "error": str(e)}
        )
        return None


def string_contains(target: str, actual: str) -> bool:
    return target in actual


def string_exactly_matches(target: str, actual: str) -> bool:
    return target.strip() == actual.strip()


def string_contains_regex(target: str, actual: str) -> bool:
    pattern = compile_expression(target)
    if pattern is None:
        return False
    return pattern.search(actual) is not None


def compare_strings(
    target_values: Sequence[str],
    actual_value: SignalValue,
    predicate_fn: Callable[[str, str], bool],
) -> bool:
    """Compare the stringified actual value against each target.

    Args:
        target_values: Target strings.
        actual_value: Signal value from the context.
        predicate_fn: Called as ``predicate_fn(target, actual)``.

    Returns:
        True if the predicate holds for any target.
    """
    actual = str(actual_value)
    return any(predicate_fn(str(target), actual) for target in target_values)


def _sign(a, b) -> int:
    return -1 if a < b else 1 if a > b else 0


def _to_number(value: SignalValue) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        # float() alone also accepts "1_000", "infinity" and non-ASCII digits
        value = value.strip()
        if not _NUMBER_PATTERN.fullmatch(value):
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def compare_numbers(
    actual_value: SignalValue,
    target_value: str,
    predicate_fn: ResultPredicate,
) -> bool:
    """Compare two numbers.

    Calls the predicate with -1, 0 or 1 if actual is less than, equal to or
    greater than target.

    Returns:
        Predicate result, or False if either side is not a number.
    """
    actual = _to_number(actual_value)
    target = _to_number(target_value)
    if actual is None or target is None:
        logger.warning(
            "Invalid numeric value for comparison",
            extra={"actual": actual_value, "target": target_value}
        )
        return False
    return predicate_fn(_sign(actual, target))


def parse_semantic_version(version: SignalValue) -> Optional[List[int]]:
    """Split a version on '.' and parse each segment as an integer.

    Returns:
        Segments, or None if any segment is not an integer.
    """
    if isinstance(version, bool):
        return None
    parts = [part.strip() for part in str(version).split(".")]
    if not all(_VERSION_SEGMENT_PATTERN.fullmatch(part) for part in parts):
        return None
    return [int(part) for part in parts]


def compare_semantic_versions(
    actual_value: SignalValue,
    target_value: str,
    predicate_fn: ResultPredicate,
) -> bool:
    """Compare two dotted version strings segment by segment.

    Missing trailing segments count as zero, so ``1.2`` equals ``1.2.0``.
    Calls the predicate with -1, 0 or 1 if actual is less than, equal to or
    greater than target.

    Returns:
        Predicate result, or False if either version is malformed.
    """
    actual = parse_semantic_version(actual_value)
    target = parse_semantic_version(target_value)
    if actual is None or target is None:
        logger.warning(
            "Invalid semantic version for comparison",
            extra={"actual": actual_value, "target": target_value}
        )
        return False

    max_length = max(len(actual), len(target))
    actual.extend([0] * (max_length - len(actual)))
    target.extend([0] * (max_length - len(target)))

    for actual_part, target_part in zip(actual, target):
        if actual_part != target_part:
            return predicate_fn(_sign(actual_part, target_part))
    return predicate_fn(0)
