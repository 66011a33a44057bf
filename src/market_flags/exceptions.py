"""market_flags exception types."""

from __future__ import annotations


class MarketFlagsError(Exception):
    """Base error for the market flags service."""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class FlagStoreError(MarketFlagsError):
    """Failure while fetching or decoding the flag dataset."""


class ConfigError(MarketFlagsError):
    """Invalid or missing startup configuration."""


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST: str = "INVALID_REQUEST"
    MARKET_NOT_FOUND: str = "MARKET_NOT_FOUND"
    CONNECTION_ERROR: str = "CONNECTION_ERROR"
    READ_ERROR: str = "READ_ERROR"
    DECODE_ERROR: str = "DECODE_ERROR"


class ConfigErrorCodes:
    """ConfigError code constants."""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
