"""Market lookup over a decoded flag set."""

from __future__ import annotations

from .exceptions import ErrorCodes, MarketFlagsError
from .models import FeatureFlag, FlagSet


def find_match(flag_set: FlagSet, requested_market: str) -> int | None:
    """Return the index of the first flag for ``requested_market``.

    Matching is exact and case-sensitive. Returns ``None`` when nothing
    matches, including for an empty flag set.
    """
    for index, flag in enumerate(flag_set.feature_flags):
        if flag.market == requested_market:
            return index
    return None


def resolve(flag_set: FlagSet, requested_market: str) -> FeatureFlag:
    """Return the first flag for ``requested_market`` or raise MARKET_NOT_FOUND."""
    index = find_match(flag_set, requested_market)
    if index is None:
        raise MarketFlagsError(
            ErrorCodes.MARKET_NOT_FOUND,
            f"No flags configured for market: {requested_market}",
        )
    return flag_set.feature_flags[index]
