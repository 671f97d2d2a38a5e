"""Unit tests for postal code classification."""

import pytest

from voice_hours.errors import ValidationError
from voice_hours.postal import InvalidPostalCodeError, PostalKind, classify, normalize


class TestClassifyUS:
    """Tests for US ZIP codes."""

    def test_five_digit_zip(self) -> None:
        """A 5-digit ZIP is US with the first digit as prefix."""
        result = classify("33067")
        assert result.kind == PostalKind.US
        assert result.prefix == "3"
        assert result.normalized == "33067"

    def test_zip_plus_four(self) -> None:
        """ZIP+4 is accepted."""
        result = classify("90210-1234")
        assert result.kind == PostalKind.US
        assert result.prefix == "9"

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        """Leading and trailing whitespace is ignored."""
        assert classify("  02134 ").normalized == "02134"


class TestClassifyCanada:
    """Tests for Canadian postal codes."""

    def test_with_space(self) -> None:
        """'A1A 1A1' format is Canadian with the first letter as prefix."""
        result = classify("M5V 3L9")
        assert result.kind == PostalKind.CA
        assert result.prefix == "M"

    def test_without_space(self) -> None:
        """The internal space is optional."""
        assert classify("M5V3L9").kind == PostalKind.CA

    def test_lower_case_is_upper_cased(self) -> None:
        """Input is normalized to upper case."""
        result = classify(" v6b 4y8 ")
        assert result.normalized == "V6B 4Y8"
        assert result.prefix == "V"


class TestInvalidCodes:
    """Tests for inputs that are neither format."""

    @pytest.mark.parametrize(
        "code",
        ["ABCDE", "123", "", "   ", "1234", "123456", "12345-12", "D1A 1A1", "W1A 1A1", "M5V  3L9"],
    )
    def test_invalid_format_raises(self, code: str) -> None:
        """Malformed codes raise InvalidPostalCodeError."""
        with pytest.raises(InvalidPostalCodeError):
            classify(code)

    def test_invalid_code_is_validation_error(self) -> None:
        """The classifier error is a user-facing validation error."""
        with pytest.raises(ValidationError) as exc_info:
            classify("ABCDE")
        assert "ABCDE" in str(exc_info.value)
        assert exc_info.value.code == "ABCDE"

    def test_non_string_raises(self) -> None:
        """Non-string input is rejected as invalid."""
        with pytest.raises(InvalidPostalCodeError):
            classify(None)  # type: ignore[arg-type]


class TestNormalization:
    """Tests for normalization idempotence."""

    @pytest.mark.parametrize("code", ["33067", " 33067-1234", "m5v 3l9", "k1a0b1 ", "A1A 1A1"])
    def test_reclassifying_normalized_code_is_stable(self, code: str) -> None:
        """Classifying the normalized form gives the same result."""
        first = classify(code)
        assert classify(first.normalized) == first
        assert normalize(first.normalized) == first.normalized
