from typing import Optional

from library_catalog.codec import FIELD_SEPARATOR, ISBN_SEPARATOR

_FORBIDDEN = (FIELD_SEPARATOR, ISBN_SEPARATOR, "\n", "\r")


class FieldValidator:
    """Checks that values can be stored in the catalog's text files."""

    @staticmethod
    def is_storable(value: Optional[str]) -> bool:
        if value is None:
            return False
        return not any(ch in value for ch in _FORBIDDEN)

    @staticmethod
    def validate_identifier(value: Optional[str]) -> bool:
        # ISBNs and user ids must also be non-empty
        if value is None or not value.strip():
            return False
        return FieldValidator.is_storable(value)

    @staticmethod
    def invalid_fields(**fields: Optional[str]) -> list:
        """Names of the fields that cannot be stored, in argument order."""
        return [name for name, value in fields.items() if not FieldValidator.is_storable(value)]
