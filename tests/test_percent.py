"""Tests for percentage bucketing in rotalabs-conditions.

Tests cover:
- Signed 64-bit hash handling (including the int64 minimum)
- Seed prefixing
- Operator boundaries (LESS_OR_EQUAL, GREATER_THAN, BETWEEN)
- Determinism and distribution of real FarmHash buckets
- Missing randomization id or operator, malformed micro percent values
- Known Fingerprint64 output
"""

import types

import pytest

from rotalabs_conditions.core.config import MicroPercentRange, PercentCondition
from rotalabs_conditions.evaluation import percent
from rotalabs_conditions.evaluation.percent import (
    build_string_to_hash,
    evaluate_percent_condition,
    hash_seeded_randomization_id,
    instance_micro_percentile,
)


@pytest.fixture
def fixed_hash(monkeypatch):
    """Replace Fingerprint64 with a function returning a fixed value.

    Returns a setter; the strings hashed are recorded on ``.calls``.
    """
    calls = []

    def _set(value: int):
        def fingerprint64(s):
            calls.append(s)
            return value

        monkeypatch.setattr(percent, "farmhash", types.SimpleNamespace(fingerprint64=fingerprint64))

    _set.calls = calls
    return _set


class TestHashing:
    """Tests for hash reinterpretation and bucketing."""

    def test_string_to_hash_with_seed(self):
        """Test that a seed prefixes the id with a dot."""
        assert build_string_to_hash("user-1", "seed") == "seed.user-1"

    def test_string_to_hash_without_seed(self):
        """Test that missing or empty seeds add no prefix."""
        assert build_string_to_hash("user-1") == "user-1"
        assert build_string_to_hash("user-1", "") == "user-1"

    def test_unsigned_hash_reinterpreted_as_signed(self, fixed_hash):
        """Test that values above int64 max become negative."""
        fixed_hash(2**64 - 1)

        assert hash_seeded_randomization_id("x") == -1

    def test_small_hash_unchanged(self, fixed_hash):
        """Test that values below the sign bit stay positive."""
        fixed_hash(123_456_789_012)

        assert hash_seeded_randomization_id("x") == 123_456_789_012
        assert instance_micro_percentile("x") == 56_789_012

    def test_negative_hash_uses_absolute_value(self, fixed_hash):
        """Test that negative hashes are negated before the modulo."""
        fixed_hash(2**64 - 250_000_005)  # signed -250_000_005

        assert instance_micro_percentile("x") == 50_000_005

    def test_int64_minimum(self, fixed_hash):
        """Test that the int64 minimum maps to |2**63| mod 100_000_000."""
        fixed_hash(2**63)

        assert hash_seeded_randomization_id("x") == -(2**63)
        assert instance_micro_percentile("x") == 54_775_808

    def test_seed_is_hashed(self, fixed_hash):
        """Test the exact string passed to the hash function."""
        fixed_hash(0)
        instance_micro_percentile("user-1", seed="exp")

        assert fixed_hash.calls == ["exp.user-1"]


class TestOperatorBoundaries:
    """Tests for operator semantics at exact bucket values."""

    def test_less_or_equal_is_inclusive(self, fixed_hash):
        """Test LESS_OR_EQUAL at, below and above the threshold."""
        fixed_hash(5_000)
        at = PercentCondition(percent_operator="LESS_OR_EQUAL", micro_percent=5_000)
        below = PercentCondition(percent_operator="LESS_OR_EQUAL", micro_percent=4_999)

        assert evaluate_percent_condition(at, "id") is True
        assert evaluate_percent_condition(below, "id") is False

    def test_greater_than_is_exclusive(self, fixed_hash):
        """Test GREATER_THAN at and below the bucket."""
        fixed_hash(5_000)
        at = PercentCondition(percent_operator="GREATER_THAN", micro_percent=5_000)
        below = PercentCondition(percent_operator="GREATER_THAN", micro_percent=4_999)

        assert evaluate_percent_condition(at, "id") is False
        assert evaluate_percent_condition(below, "id") is True

    def test_between_lower_bound_exclusive(self, fixed_hash):
        """Test that a bucket equal to the lower bound does not match."""
        fixed_hash(1_000)
        condition = PercentCondition(
            percent_operator="BETWEEN",
            micro_percent_range=MicroPercentRange(1_000, 2_000),
        )

        assert evaluate_percent_condition(condition, "id") is False

    def test_between_upper_bound_inclusive(self, fixed_hash):
        """Test that a bucket equal to the upper bound matches."""
        fixed_hash(2_000)
        condition = PercentCondition(
            percent_operator="BETWEEN",
            micro_percent_range=MicroPercentRange(1_000, 2_000),
        )

        assert evaluate_percent_condition(condition, "id") is True

    def test_missing_micro_percent_defaults_to_zero(self, fixed_hash):
        """Test that an absent micro_percent compares as zero."""
        fixed_hash(0)
        condition = PercentCondition(percent_operator="LESS_OR_EQUAL")

        assert evaluate_percent_condition(condition, "id") is True

    def test_between_without_range(self, fixed_hash):
        """Test that BETWEEN without a range never matches."""
        fixed_hash(0)
        condition = PercentCondition(percent_operator="BETWEEN")

        assert evaluate_percent_condition(condition, "id") is False

    def test_unknown_operator(self, fixed_hash):
        """Test that UNKNOWN never matches."""
        fixed_hash(0)
        condition = PercentCondition(percent_operator="UNKNOWN", micro_percent=100_000_000)

        assert evaluate_percent_condition(condition, "id") is False


class TestPreconditions:
    """Tests for missing inputs."""

    def test_missing_randomization_id(self):
        """Test that no randomization id evaluates to False."""
        condition = PercentCondition(percent_operator="LESS_OR_EQUAL", micro_percent=100_000_000)

        assert evaluate_percent_condition(condition, None) is False
        assert evaluate_percent_condition(condition, "") is False

    def test_missing_operator(self):
        """Test that no operator evaluates to False."""
        condition = PercentCondition(micro_percent=100_000_000)

        assert evaluate_percent_condition(condition, "user-1") is False

    @pytest.mark.parametrize("micro_percent", ["50", 50.0, True, [50]])
    def test_non_integer_micro_percent(self, fixed_hash, micro_percent):
        """Test that a micro_percent that is not an int evaluates to False."""
        fixed_hash(0)
        condition = PercentCondition(percent_operator="LESS_OR_EQUAL", micro_percent=micro_percent)

        assert evaluate_percent_condition(condition, "user-1") is False

    @pytest.mark.parametrize("lower,upper", [("0", 100_000_000), (0, "100000000"), (0, None)])
    def test_non_integer_range_bounds(self, fixed_hash, lower, upper):
        """Test that BETWEEN with malformed or missing bounds never matches."""
        fixed_hash(5)
        condition = PercentCondition(
            percent_operator="BETWEEN",
            micro_percent_range=MicroPercentRange(lower, upper),
        )

        assert evaluate_percent_condition(condition, "user-1") is False


class TestFarmHashBuckets:
    """Tests using the real Fingerprint64 hash."""

    def test_known_empty_string_fingerprint(self):
        """Test against the published Fingerprint64 of the empty string."""
        assert hash_seeded_randomization_id("") == 0x9AE16A3B2F90404F - 2**64
        assert instance_micro_percentile("") == 75_154_353

    def test_bucket_in_range(self):
        """Test that buckets fall in [0, 100_000_000)."""
        for i in range(200):
            assert 0 <= instance_micro_percentile(f"user-{i}") < 100_000_000

    def test_deterministic(self):
        """Test that the same seed and id always land in the same bucket."""
        first = instance_micro_percentile("user-42", seed="seed-a")

        for _ in range(5):
            assert instance_micro_percentile("user-42", seed="seed-a") == first

    def test_ids_spread_across_buckets(self):
        """Test that different ids land in different buckets."""
        buckets = {instance_micro_percentile(f"user-{i}") for i in range(100)}

        assert len(buckets) > 95

    def test_seed_changes_bucket(self):
        """Test that the seed namespaces the bucketing."""
        unseeded = [instance_micro_percentile(f"user-{i}") for i in range(50)]
        seeded = [instance_micro_percentile(f"user-{i}", seed="exp") for i in range(50)]

        assert unseeded != seeded

    def test_full_range_between_always_matches(self):
        """Test that BETWEEN 0..100_000_000 matches every id."""
        condition = PercentCondition(
            percent_operator="BETWEEN",
            micro_percent_range=MicroPercentRange(0, 100_000_000),
        )

        for i in range(500):
            assert evaluate_percent_condition(condition, f"id-{i}")

    def test_half_rollout_distribution(self):
        """Test that a 50% rollout includes roughly half the population."""
        condition = PercentCondition(
            percent_operator="LESS_OR_EQUAL",
            micro_percent=50_000_000,
            seed="distribution",
        )

        matched = sum(
            evaluate_percent_condition(condition, f"id-{i}") for i in range(10_000)
        )

        assert 4_700 <= matched <= 5_300
