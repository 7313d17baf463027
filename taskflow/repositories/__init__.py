"""Storage and remote service implementations."""

from .memory import (
    InMemoryStorage,
    InMemoryBackend,
    InMemoryAuthApi,
    InMemoryTaskApi,
)
from .json_file import JsonFileStorage
from .http import HttpAuthApi, HttpTaskApi

__all__ = [
    "InMemoryStorage",
    "InMemoryBackend",
    "InMemoryAuthApi",
    "InMemoryTaskApi",
    "JsonFileStorage",
    "HttpAuthApi",
    "HttpTaskApi",
]
