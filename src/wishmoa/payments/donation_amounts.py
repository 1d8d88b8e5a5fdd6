"""Preset donation amounts and the donor's amount choice."""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel

from ..domain.errors import InvalidAmountError

DEFAULT_DONATION_AMOUNTS: tuple[int, ...] = (15000, 20000, 25000)


def parse_donation_amounts(
    text: Optional[str], defaults: Iterable[int] = DEFAULT_DONATION_AMOUNTS
) -> list[int]:
    """Parse a project's comma-separated preset amounts, e.g. "15000,20000"."""
    if not text or not text.strip():
        return list(defaults)
    amounts: list[int] = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk.isdigit():
            continue
        amount = int(chunk)
        if amount > 0:
            amounts.append(amount)
    return amounts or list(defaults)


def format_donation_amounts(amounts: Iterable[int]) -> Optional[str]:
    joined = ",".join(str(a) for a in amounts)
    return joined or None


class AmountSelection(BaseModel):
    """Either one of the preset buttons or "enter my own amount"."""

    preset_amount: Optional[int] = None

    @classmethod
    def preset(cls, amount: int) -> "AmountSelection":
        if amount <= 0:
            raise InvalidAmountError("Preset amount must be positive")
        return cls(preset_amount=amount)

    @classmethod
    def custom(cls) -> "AmountSelection":
        return cls(preset_amount=None)

    @property
    def is_custom(self) -> bool:
        return self.preset_amount is None

    def resolve(self, custom_amount: Optional[int] = None) -> int:
        """Return the amount to donate in whole won."""
        if self.preset_amount is not None:
            # model_validate does not go through preset()
            if self.preset_amount <= 0:
                raise InvalidAmountError("Preset amount must be positive")
            return self.preset_amount
        if custom_amount is None or custom_amount <= 0:
            raise InvalidAmountError("Enter a valid gift amount")
        return custom_amount
