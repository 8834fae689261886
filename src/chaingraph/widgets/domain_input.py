"""Domain input widget."""

import re

from textual.validation import ValidationResult, Validator
from textual.widgets import Input

LABEL = r"(?:[a-zA-Z0-9_](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)"
DOMAIN_PATTERN = re.compile(rf"^(?:{LABEL}\.)*{LABEL}\.?$")


def normalize_domain(value: str) -> str:
    """Lower-case a domain and give it a trailing dot; "." stays the root."""
    value = value.strip().lower()
    if not value or value == ".":
        return "."
    return value if value.endswith(".") else value + "."


class DomainValidator(Validator):
    """Validator for domain names."""

    def validate(self, value: str) -> ValidationResult:
        value = value.strip()
        if not value:
            return self.failure("Enter a domain name")
        if value == ".":
            return self.success()
        if len(value.rstrip(".")) > 253:
            return self.failure("Domain name too long")
        if not DOMAIN_PATTERN.match(value):
            return self.failure("Invalid domain format")
        return self.success()


class DomainInput(Input):
    """Input widget for entering domain names."""

    DEFAULT_CSS = """
    DomainInput:focus {
        border: tall $accent;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(
            placeholder="Enter domain (e.g., example.com)",
            validators=[DomainValidator()],
            **kwargs
        )

    @property
    def domain(self) -> str:
        """Get the normalized domain."""
        return normalize_domain(self.value)
