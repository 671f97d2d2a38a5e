"""US ZIP and Canadian postal code classification."""

import re
from dataclasses import dataclass
from enum import Enum

from voice_hours.errors import ValidationError

US_ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

# Canada Post never uses D, F, I, O, Q or U; W and Z never lead.
CA_POSTAL_PATTERN = re.compile(
    r"^[ABCEGHJ-NPRSTVXY]\d[ABCEGHJ-NPRSTV-Z] ?\d[ABCEGHJ-NPRSTV-Z]\d$"
)


class PostalKind(str, Enum):
    """Country a postal code belongs to."""

    US = "US"
    CA = "CA"


@dataclass(frozen=True)
class PostalCode:
    """A classified postal code."""

    kind: PostalKind
    prefix: str
    normalized: str


class InvalidPostalCodeError(ValidationError):
    """Raised when a string is neither a US ZIP nor a Canadian postal code."""

    def __init__(self, code: object, message: str | None = None) -> None:
        self.code = code
        super().__init__(
            message
            or f"Invalid postal code format: {code}. "
            "Must be a valid US ZIP code or Canadian postal code."
        )


def normalize(code: str) -> str:
    """Strip surrounding whitespace and upper-case."""
    return code.strip().upper()


def classify(code: str) -> PostalCode:
    """Classify a postal code and extract its region prefix.

    Args:
        code: Raw user input, e.g. "33067", "33067-1234" or "m5v 3l9".

    Returns:
        PostalCode with the country kind and the one-character prefix
        (first digit for US, first letter for Canada).

    Raises:
        InvalidPostalCodeError: If the input matches neither format.
    """
    if not isinstance(code, str) or not code.strip():
        raise InvalidPostalCodeError(code, "Postal code is required and must be a string")

    clean = normalize(code)

    if US_ZIP_PATTERN.match(clean):
        return PostalCode(kind=PostalKind.US, prefix=clean[0], normalized=clean)

    if CA_POSTAL_PATTERN.match(clean):
        return PostalCode(kind=PostalKind.CA, prefix=clean[0], normalized=clean)

    raise InvalidPostalCodeError(code)
