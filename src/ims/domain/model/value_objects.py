"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Price:
    """Monetary amount in minor units (pence, cents).

    Integers only: every amount that crosses the domain boundary has
    already been converted to minor units.
    """

    minor: int

    def __post_init__(self) -> None:
        if isinstance(self.minor, bool) or not isinstance(self.minor, int):
            raise ValidationError(
                f"Price must be an integer number of minor units, got {type(self.minor).__name__}"
            )
        if self.minor < 0:
            raise ValidationError(f"Price cannot be negative, got {self.minor}")

    def __add__(self, other: Price) -> Price:
        return Price(self.minor + other.minor)

    def __mul__(self, factor: int) -> Price:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Price by int, got {type(factor).__name__}")
        return Price(self.minor * factor)

    def __lt__(self, other: Price) -> bool:
        return self.minor < other.minor

    def __str__(self) -> str:
        return str(self.minor)

    @staticmethod
    def zero() -> Price:
        return Price(0)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order, reserve or ship zero or
    negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
