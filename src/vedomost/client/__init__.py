"""Client side of the journal: API wrapper, state object and render loop."""

from .api import VedomostApi
from .http import ApiClient, ApiError, SessionExpiredError
from .state import ClientState
from .store import AttendanceStore
from .token_store import JsonFileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AttendanceStore",
    "ClientState",
    "JsonFileTokenStore",
    "MemoryTokenStore",
    "SessionExpiredError",
    "TokenStore",
    "VedomostApi",
]
