"""Save-data discriminators and limits shared by the service and API layers."""

from enum import IntEnum

# Number of session save slots per account.
SESSION_SLOT_COUNT = 5


class SaveDataType(IntEnum):
    """Kind of save record addressed by a request."""

    SYSTEM = 0
    SESSION = 1
