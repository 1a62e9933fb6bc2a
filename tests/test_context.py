"""Tests for evaluation context in rotalabs-conditions.

Tests cover:
- EvaluationContext initialization
- Randomization id resolution
- Signal lookups
- Coercion from mappings
"""

import pytest

from rotalabs_conditions.core.context import EvaluationContext


class TestEvaluationContext:
    """Tests for EvaluationContext class."""

    def test_context_creation(self):
        """Test creating a context from a flat dictionary."""
        data = {"randomization_id": "user-1", "country": "CA"}
        ctx = EvaluationContext(data)

        assert ctx.randomization_id == "user-1"
        assert ctx.get("country") == "CA"
        assert ctx.data is data  # zero-copy

    def test_explicit_randomization_id(self):
        """Test that an explicit randomization id wins over the mapping."""
        ctx = EvaluationContext({"randomization_id": "from-data"}, randomization_id="explicit")

        assert ctx.randomization_id == "explicit"

    def test_empty_context(self):
        """Test defaults for an empty context."""
        ctx = EvaluationContext()

        assert ctx.randomization_id is None
        assert ctx.get("missing") is None
        assert ctx.get("missing", "fallback") == "fallback"
        assert "missing" not in ctx

    def test_falsy_values_are_present(self):
        """Test that zero and empty string are real signal values."""
        ctx = EvaluationContext({"count": 0, "label": ""})

        assert ctx.get("count") == 0
        assert ctx.get("label") == ""
        assert "count" in ctx

    def test_to_dict(self):
        """Test converting context to dictionary."""
        ctx = EvaluationContext({"country": "CA"}, randomization_id="user-1")

        assert ctx.to_dict() == {"country": "CA", "randomization_id": "user-1"}
        assert sorted(ctx) == ["country"]


class TestCoerce:
    """Tests for EvaluationContext.coerce."""

    def test_coerce_none(self):
        """Test that None becomes an empty context."""
        ctx = EvaluationContext.coerce(None)

        assert isinstance(ctx, EvaluationContext)
        assert ctx.randomization_id is None

    def test_coerce_mapping(self):
        """Test that a mapping is wrapped."""
        ctx = EvaluationContext.coerce({"randomization_id": "abc"})

        assert ctx.randomization_id == "abc"

    def test_coerce_context_is_identity(self):
        """Test that an existing context is returned as-is."""
        ctx = EvaluationContext({})

        assert EvaluationContext.coerce(ctx) is ctx

    def test_coerce_invalid_type(self):
        """Test that non-mapping input raises TypeError."""
        with pytest.raises(TypeError, match="must be a mapping"):
            EvaluationContext.coerce(["not", "a", "mapping"])
