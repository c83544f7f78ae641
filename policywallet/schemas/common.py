"""
Shared Pydantic building blocks.

Wire format follows the client JSON (camelCase keys, money as plain numbers).
Negative money and counts are clamped to zero when a model is built.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

ZERO = Decimal("0")


def clamp_money(value: Any) -> Decimal:
    """Coerce to Decimal and clamp negatives (and blanks) to zero."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise ValueError("Money amount cannot be a boolean")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            raise ValueError(f"Money amount must be finite: {value!r}")
        return amount if amount > ZERO else ZERO
    except InvalidOperation as e:
        raise ValueError(f"Invalid money amount: {value!r}") from e


def clamp_count(value: Any) -> int:
    if value is None or value == "":
        return 0
    count = int(value)
    return count if count > 0 else 0


def money_to_json(value: Decimal) -> Union[int, float]:
    """Serialize as an int when integral, otherwise as a float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def to_calendar_day(value: Any) -> Any:
    """Strip time of day; aware timestamps are read in the wallet's zone."""
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            from policywallet.core.config import get_settings

            value = value.astimezone(get_settings().zone)
        return value.date()
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(clamp_money),
    PlainSerializer(money_to_json, return_type=Union[int, float], when_used="json"),
]
# Signed figures (net results, percentages): not clamped, same JSON form as Money.
Amount = Annotated[
    Decimal,
    PlainSerializer(money_to_json, return_type=Union[int, float], when_used="json"),
]
Count = Annotated[int, BeforeValidator(clamp_count)]
CalendarDay = Annotated[date, BeforeValidator(to_calendar_day)]


class WalletModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using the client wire format."""
        return self.model_dump(mode="json", by_alias=True)
