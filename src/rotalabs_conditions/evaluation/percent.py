"""Deterministic percentage bucketing for percent conditions.

A randomization id (optionally prefixed by a seed) is hashed with FarmHash
Fingerprint64, the same 64-bit hash the Remote Config backend uses, and
mapped into [0, 100_000_000) micro-percent. Server and client SDKs must
agree on the bucket bit for bit.
"""

import logging
from typing import Optional

import farmhash

from rotalabs_conditions.core.config import (
    MICRO_PERCENT_MAX,
    PercentCondition,
    PercentConditionOperator,
)

logger = logging.getLogger(__name__)

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN_BIT = 1 << 63


def hash_seeded_randomization_id(string_to_hash: str) -> int:
    """Hash a seeded randomization id to a signed 64-bit integer.

    Fingerprint64 yields an unsigned value; it is reinterpreted as a
    two's-complement int64.

    Args:
        string_to_hash: ``"<seed>.<randomization_id>"`` or the bare id.

    Returns:
        Signed 64-bit hash.
    """
    unsigned = farmhash.fingerprint64(string_to_hash) & _UINT64_MASK
    if unsigned & _INT64_SIGN_BIT:
        return unsigned - (1 << 64)
    return unsigned


def build_string_to_hash(randomization_id: str, seed: Optional[str] = None) -> str:
    """Prefix the randomization id with ``seed.`` when a seed is set."""
    seed_prefix = f"{seed}." if seed else ""
    return f"{seed_prefix}{randomization_id}"


def instance_micro_percentile(randomization_id: str, seed: Optional[str] = None) -> int:
    """Compute the micro-percent bucket of a randomization id.

    The absolute value of the signed hash is taken with Python integers, so
    the int64 minimum maps to 2**63 rather than overflowing back to itself.

    Args:
        randomization_id: Stable per-user identifier.
        seed: Optional condition seed.

    Returns:
        Bucket in [0, 100_000_000).
    """
    hash64 = hash_seeded_randomization_id(build_string_to_hash(randomization_id, seed))
    return abs(hash64) % MICRO_PERCENT_MAX


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def evaluate_percent_condition(
    percent_condition: PercentCondition,
    randomization_id: Optional[str],
    log: Optional[logging.Logger] = None,
) -> bool:
    """Evaluate a percent condition for a randomization id.

    Args:
        percent_condition: Condition to evaluate.
        randomization_id: Identifier from the evaluation context.
        log: Logger for diagnostics (defaults to module logger).

    Returns:
        True if the id's bucket satisfies the operator, False otherwise.
    """
    log = log or logger

    if not randomization_id or not isinstance(randomization_id, str):
        log.warning("Missing randomization_id in context for percent condition")
        return False

    percent_operator = percent_condition.percent_operator
    if percent_operator is None:
        log.warning("Missing percent operator for percent condition")
        return False

    micro_percent = percent_condition.micro_percent
    micro_percent_range = percent_condition.micro_percent_range
    lower_bound = upper_bound = None
    if micro_percent_range is not None:
        lower_bound = micro_percent_range.micro_percent_lower_bound
        upper_bound = micro_percent_range.micro_percent_upper_bound

    for value in (micro_percent, lower_bound, upper_bound):
        if value is not None and not _is_integer(value):
            log.warning(
                "Invalid micro percent for percent condition",
                extra={"micro_percent": repr(value)}
            )
            return False

    # Absent numbers default to zero.
    micro_percent = micro_percent or 0
    lower_bound = lower_bound or 0
    upper_bound = upper_bound or 0

    percentile = instance_micro_percentile(randomization_id, percent_condition.seed)

    log.debug(
        "Computed instance micro-percentile",
        extra={"seed": percent_condition.seed, "percentile": percentile}
    )

    if percent_operator == PercentConditionOperator.LESS_OR_EQUAL:
        return percentile <= micro_percent

    elif percent_operator == PercentConditionOperator.GREATER_THAN:
        return percentile > micro_percent

    elif percent_operator == PercentConditionOperator.BETWEEN:
        return lower_bound < percentile <= upper_bound

    log.warning(
        "Unknown percent operator",
        extra={"operator": percent_operator.value}
    )
    return False
