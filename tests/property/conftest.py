# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- JSON-safe values (RFC 8785 compatible), free of token markers
- Marker-like noise (text built from marker fragments)
- Literal pieces for string concatenation

Usage:
    from tests.property.conftest import token_free_values

    @given(value=token_free_values)
    def test_identity(value: Any) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from stackforge.core.tokens.encoding import contains_marker

# =============================================================================
# RFC 8785 / JSON Canonicalization Scheme Constraints
# =============================================================================

# RFC 8785 (JCS) uses JavaScript-safe integers: -(2^53-1) to (2^53-1)
MAX_SAFE_INT = 2**53 - 1
MIN_SAFE_INT = -(2**53 - 1)


# =============================================================================
# Core JSON Strategies
# =============================================================================

# Text that cannot be mistaken for an encoded token
plain_text = st.text(max_size=50).filter(lambda s: not contains_marker(s))

# JSON-safe primitives (excluding NaN/Infinity which are rejected)
json_primitives = (
    st.none()
    | st.booleans()
    | st.integers(min_value=MIN_SAFE_INT, max_value=MAX_SAFE_INT)
    | st.floats(allow_nan=False, allow_infinity=False)
    | plain_text
)

# Recursive strategy for nested property trees without tokens
token_free_values = st.recursive(
    json_primitives,
    lambda children: (st.lists(children, max_size=8) | st.dictionaries(plain_text, children, max_size=8)),
    max_leaves=40,
)


# =============================================================================
# Marker Noise
# =============================================================================

# Fragments of the marker grammar, recombined into near-misses
_MARKER_PIECES = ["${", "#{", "Token[", "token[", "v1.", "v2.", "v1", ".", "Key", "Key_Arn", "a-b", "1", "42", "]}", "]", "}", "{", "$", "#", " "]

marker_noise = st.lists(st.sampled_from(_MARKER_PIECES), max_size=12).map("".join)

# Literal pieces for "a-" + token + "-b" style concatenation
literal_pieces = st.text(alphabet=st.characters(exclude_characters="${}#"), max_size=10)
