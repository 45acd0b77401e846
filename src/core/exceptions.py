"""
Error hierarchy for save-data operations.

These are returned as values from the service layer for routine failures
(bad discriminator, slot out of range, missing record) and translated into
HTTP status codes by the API layer.
"""


class SaveDataError(Exception):
    """Base exception for all save-data errors."""


class InvalidDataTypeError(SaveDataError):
    """Data type discriminator is neither system nor session."""

    def __init__(self, datatype: int | None = None):
        self.datatype = datatype
        super().__init__("invalid data type")


class SlotOutOfRangeError(SaveDataError):
    """Session slot index is outside the allowed range."""

    def __init__(self, slot: int):
        self.slot = slot
        super().__init__(f"slot id {slot} out of range")


class SaveDataNotFoundError(SaveDataError):
    """No save record exists for the requested account/slot."""
