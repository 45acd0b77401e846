"""
Core domain layer for the save-data backend.

Exposes save-data discriminators, slot limits and the error hierarchy.
"""

from src.core.defs import SESSION_SLOT_COUNT, SaveDataType
from src.core.exceptions import (
    InvalidDataTypeError,
    SaveDataError,
    SaveDataNotFoundError,
    SlotOutOfRangeError,
)

__all__ = [
    "SESSION_SLOT_COUNT",
    "SaveDataType",
    "SaveDataError",
    "InvalidDataTypeError",
    "SlotOutOfRangeError",
    "SaveDataNotFoundError",
]
