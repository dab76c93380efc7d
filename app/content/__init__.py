"""Content pipeline: remote source, fallback snapshot, fast cache, and transforms."""

from app.content.fallback_store import FallbackStore, FallbackWriteError
from app.content.fast_cache import FastCache
from app.content.models import ContentItem
from app.content.remote_source import (
    RemoteNotFoundError,
    RemoteSource,
    RemoteSourceError,
    RemoteUnavailableError,
    RemoteWriteError,
    SqlAlchemyRemoteSource,
)

__all__ = [
    "ContentItem",
    "FallbackStore",
    "FallbackWriteError",
    "FastCache",
    "RemoteNotFoundError",
    "RemoteSource",
    "RemoteSourceError",
    "RemoteUnavailableError",
    "RemoteWriteError",
    "SqlAlchemyRemoteSource",
]
