from dataclasses import dataclass

from planscan.api.models import ModelType
from planscan.wizard.exceptions import UnknownTradeError


@dataclass(frozen=True)
class Trade:
    """A selectable trade/discipline shown to the user."""

    id: str
    display_name: str


TRADE_OPTIONS: tuple[Trade, ...] = (
    Trade("elec-data-security-detector", "Electrical, Data, IT, AV, Security"),
    Trade("mechanical-symbol-detector", "Mechanical"),
    Trade("fire-alarm-detector-v1", "Fire Alarm"),
    Trade("fire-protection-sprinkler-model", "Fire Protection, Sprinkler"),
    Trade("plumbing-detector", "Plumbing"),
)

MODEL_TYPE_BY_TRADE: dict[str, ModelType] = {
    "elec-data-security-detector": ModelType.ELECTRICAL,
    "mechanical-symbol-detector": ModelType.MECHANICAL,
    "fire-alarm-detector-v1": ModelType.FIRE_ALARM,
    "fire-protection-sprinkler-model": ModelType.FIRE_SPRINKLER,
    "plumbing-detector": ModelType.PLUMBING,
}


def find_trade(trade_id: str) -> Trade | None:
    return next((t for t in TRADE_OPTIONS if t.id == trade_id), None)


def filter_trades(query: str = "") -> list[Trade]:
    """Case-insensitive substring match on display name."""
    needle = query.strip().lower()
    return [t for t in TRADE_OPTIONS if needle in t.display_name.lower()]


def resolve_model_type(trade: Trade) -> ModelType:
    """Map a trade to the model family the backend should run.

    Raises:
        UnknownTradeError: if the trade is missing from MODEL_TYPE_BY_TRADE.
    """
    model_type = MODEL_TYPE_BY_TRADE.get(trade.id)
    if model_type is None:
        raise UnknownTradeError("Invalid model type selected")
    return model_type
