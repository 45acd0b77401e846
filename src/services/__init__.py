"""
Application services layer.

Provides use-case oriented services that glue request handling with
persistence.
"""

from .savedata_service import SaveDataService

__all__ = ["SaveDataService"]
