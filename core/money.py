"""
Money value type.

Amounts are held as integer minor units (cents). Decimal input coming from
requests is quantized to two fractional digits with ROUND_HALF_UP before it
is converted, so ``16.33`` becomes ``1633`` and ``10.504`` becomes ``1050``.

Formatting for display lives in ``schemas.money_format``; this module knows
nothing about locales.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")
MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True, slots=True)
class Money:
    """Immutable amount in minor units."""

    cents: int

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise TypeError(f"Money needs integer minor units, got {type(self.cents).__name__}")

    @classmethod
    def from_decimal(cls, amount: Decimal | str | int) -> Money:
        """
        Convert a major-unit amount (e.g. dollars) to Money.

        Raises:
            ValueError: If the amount is not a finite number. Floats are
                rejected so binary rounding never leaks into stored values.
        """
        if isinstance(amount, float):
            raise ValueError("Money does not accept float input, pass a Decimal or str")
        try:
            value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {amount}") from e
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {amount}")
        rounded = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        return cls(int(rounded * MINOR_UNITS_PER_MAJOR))

    def to_decimal(self) -> Decimal:
        """Major-unit amount with two fractional digits."""
        return (Decimal(self.cents) / MINOR_UNITS_PER_MAJOR).quantize(CENTS)

    @property
    def is_negative(self) -> bool:
        return self.cents < 0

    def __str__(self) -> str:
        return str(self.to_decimal())
