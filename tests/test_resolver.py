"""Market resolver tests."""

import pytest

from market_flags import (
    ErrorCodes,
    FeatureFlag,
    FlagSet,
    MarketFlagsError,
    SplitPercentage,
    find_match,
    resolve,
)


def make_set(*markets: str) -> FlagSet:
    return FlagSet(
        feature_flags=[
            FeatureFlag(market=m, new_feature_active=i % 2 == 0)
            for i, m in enumerate(markets)
        ]
    )


def test_find_match_returns_index() -> None:
    """The index of the matching flag is returned."""
    flag_set = make_set("US", "FR", "DE")
    assert find_match(flag_set, "FR") == 1
    assert find_match(flag_set, "DE") == 2


def test_find_match_not_found() -> None:
    """An absent market yields None."""
    assert find_match(make_set("US"), "FR") is None


@pytest.mark.parametrize("market", ["US", "", "anything"])
def test_empty_flag_set_never_matches(market: str) -> None:
    """An empty flag set matches nothing."""
    assert find_match(FlagSet(), market) is None


def test_first_match_wins_on_duplicates() -> None:
    """Duplicate markets resolve to the first occurrence."""
    flag_set = make_set("FR", "US", "US", "US")
    assert find_match(flag_set, "US") == 1


def test_match_is_case_sensitive() -> None:
    """Market values are compared exactly."""
    assert find_match(make_set("US"), "us") is None


def test_repeated_calls_are_identical_and_do_not_mutate() -> None:
    """Lookups are repeatable and leave the flag set untouched."""
    flag_set = make_set("US", "FR")
    before = flag_set.model_dump()
    assert find_match(flag_set, "FR") == find_match(flag_set, "FR")
    assert flag_set.model_dump() == before


def test_matched_flag_round_trips() -> None:
    """The matched flag survives encode and decode unchanged."""
    flag = FeatureFlag(
        market="SE",
        new_feature_active=True,
        ab_split_percentage=SplitPercentage(new=10, current=90),
    )
    flag_set = FlagSet(feature_flags=[FeatureFlag(market="US", new_feature_active=False), flag])
    matched = flag_set.feature_flags[find_match(flag_set, "SE")]  # type: ignore[index]
    assert FeatureFlag.model_validate_json(matched.to_json()) == flag


def test_resolve_returns_flag() -> None:
    """resolve returns the matching flag."""
    assert resolve(make_set("US", "FR"), "FR").market == "FR"


def test_resolve_not_found_raises() -> None:
    """resolve raises MARKET_NOT_FOUND for an absent market."""
    with pytest.raises(MarketFlagsError) as exc_info:
        resolve(make_set("US"), "FR")
    assert exc_info.value.code == ErrorCodes.MARKET_NOT_FOUND
    assert str(exc_info.value).startswith("MARKET_NOT_FOUND: ")
