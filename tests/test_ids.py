"""
Tests for boundary and Content-ID token generation.
"""

import pytest

from mimesend.exceptions import TokenGenerationError
from mimesend.mime.ids import (
    BOUNDARY_LENGTH,
    CONTENT_ID_LENGTH,
    TOKEN_ALPHABET,
    IDGenerator,
)


# =============================================================================
# Random Mode Tests
# =============================================================================

class TestRandomTokens:
    """Test tokens drawn from the alphabet."""

    def test_token_length(self):
        """Test that random tokens have the requested length."""
        ids = IDGenerator()
        assert len(ids.next_boundary()) == BOUNDARY_LENGTH
        assert len(ids.next_content_id()) == CONTENT_ID_LENGTH
        assert len(ids.next_token(7)) == 7

    def test_token_alphabet(self):
        """Test that random tokens only use letters and digits."""
        token = IDGenerator().next_token(200)
        assert set(token) <= set(TOKEN_ALPHABET)

    def test_tokens_differ(self):
        """Test that consecutive random tokens are distinct."""
        ids = IDGenerator()
        tokens = {ids.next_content_id() for _ in range(50)}
        assert len(tokens) == 50

    def test_not_deterministic(self):
        """Test that a generator without prefix is random."""
        assert IDGenerator().deterministic is False

    def test_issued_counts_tokens(self):
        """Test that every generated token is counted."""
        ids = IDGenerator()
        ids.next_boundary()
        ids.next_content_id()
        assert ids.issued == 2


# =============================================================================
# Deterministic Mode Tests
# =============================================================================

class TestDeterministicTokens:
    """Test prefix plus counter tokens."""

    def test_counter_starts_at_one(self):
        """Test that the first token carries counter 1."""
        ids = IDGenerator(prefix="ATTACH_")
        assert ids.next_token(12) == "ATTACH_00001"
        assert ids.next_token(12) == "ATTACH_00002"

    def test_shared_counter(self):
        """Test that boundaries and Content-IDs share one counter."""
        ids = IDGenerator(prefix="ID_")
        assert ids.next_content_id() == "ID_" + "1".zfill(CONTENT_ID_LENGTH - 3)
        assert ids.next_boundary() == "ID_00000000000000002"

    def test_empty_prefix(self):
        """Test that an empty prefix still selects deterministic mode."""
        ids = IDGenerator(prefix="")
        assert ids.deterministic is True
        assert ids.next_token(4) == "0001"

    def test_counters_are_per_generator(self):
        """Test that two generators count independently."""
        first = IDGenerator(prefix="X")
        second = IDGenerator(prefix="X")
        first.next_token(5)
        assert second.next_token(5) == "X0001"

    def test_counter_exactly_fills_length(self):
        """Test that a counter filling the remaining width is accepted."""
        ids = IDGenerator(prefix="AB")
        assert ids.next_token(3) == "AB1"

    def test_prefix_too_long(self):
        """Test that a prefix leaving no room for the counter is rejected."""
        ids = IDGenerator(prefix="A" * BOUNDARY_LENGTH)

        with pytest.raises(TokenGenerationError) as exc_info:
            ids.next_boundary()

        assert exc_info.value.counter == 1
        assert exc_info.value.length == BOUNDARY_LENGTH

    def test_counter_overflow(self):
        """Test that a counter outgrowing the width is rejected."""
        ids = IDGenerator(prefix="AB")
        for _ in range(9):
            ids.next_token(3)

        with pytest.raises(TokenGenerationError):
            ids.next_token(3)
