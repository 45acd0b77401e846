from src.data.config import DatabaseSettings, build_database_url, get_settings
from src.data.models import Account, AccountSession, Base, SessionSaveData, SystemSaveData
from src.data.repository import SaveDataRepository
from src.data.session import Database

__all__ = [
    "DatabaseSettings",
    "build_database_url",
    "get_settings",
    "Base",
    "Account",
    "AccountSession",
    "SystemSaveData",
    "SessionSaveData",
    "Database",
    "SaveDataRepository",
]
