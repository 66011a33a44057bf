"""Per-market feature flag lookup service."""

__version__ = "0.1.0"

from .config import ServiceConfig, load_config
from .exceptions import (
    ConfigError,
    ConfigErrorCodes,
    ErrorCodes,
    FlagStoreError,
    MarketFlagsError,
)
from .handler import FlagRequestHandler, FlagResponse, cors_headers
from .loader import FlagStoreLoader
from .models import FeatureFlag, FlagSet, RequestBody, SplitPercentage
from .resolver import find_match, resolve
from .storage import BlobStore, InMemoryBlobStore

__all__ = [
    "BlobStore",
    "ConfigError",
    "ConfigErrorCodes",
    "ErrorCodes",
    "FeatureFlag",
    "FlagRequestHandler",
    "FlagResponse",
    "FlagSet",
    "FlagStoreError",
    "FlagStoreLoader",
    "InMemoryBlobStore",
    "MarketFlagsError",
    "RequestBody",
    "ServiceConfig",
    "SplitPercentage",
    "cors_headers",
    "find_match",
    "load_config",
    "resolve",
]
