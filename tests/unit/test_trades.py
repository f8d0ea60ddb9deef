import pytest

from planscan.api.models import ModelType
from planscan.wizard.exceptions import UnknownTradeError
from planscan.wizard.trades import (
    MODEL_TYPE_BY_TRADE,
    TRADE_OPTIONS,
    Trade,
    filter_trades,
    find_trade,
    resolve_model_type,
)


class TestResolveModelType:
    @pytest.mark.parametrize(
        ("trade_id", "model_type"),
        [
            ("elec-data-security-detector", ModelType.ELECTRICAL),
            ("mechanical-symbol-detector", ModelType.MECHANICAL),
            ("fire-alarm-detector-v1", ModelType.FIRE_ALARM),
            ("fire-protection-sprinkler-model", ModelType.FIRE_SPRINKLER),
            ("plumbing-detector", ModelType.PLUMBING),
        ],
    )
    def test_maps_trade_to_model_type(self, trade_id: str, model_type: ModelType) -> None:
        trade = find_trade(trade_id)
        assert trade is not None
        assert resolve_model_type(trade) is model_type

    def test_every_option_has_a_model_type(self) -> None:
        assert {t.id for t in TRADE_OPTIONS} == set(MODEL_TYPE_BY_TRADE)

    def test_unknown_trade_raises(self) -> None:
        with pytest.raises(UnknownTradeError, match="Invalid model type selected"):
            resolve_model_type(Trade("hvac-v0", "HVAC"))


class TestFilterTrades:
    def test_empty_query_returns_all(self) -> None:
        assert filter_trades("") == list(TRADE_OPTIONS)

    def test_case_insensitive_substring(self) -> None:
        assert [t.id for t in filter_trades("FIRE")] == [
            "fire-alarm-detector-v1",
            "fire-protection-sprinkler-model",
        ]

    def test_no_match(self) -> None:
        assert filter_trades("roofing") == []


class TestFindTrade:
    def test_unknown_id(self) -> None:
        assert find_trade("nope") is None
