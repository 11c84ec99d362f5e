"""Fixed-coupon bond pricing and yield built on the TVM primitives."""

import math
from datetime import date

from tvm_finance.core.time_value import present_value, rate
from tvm_finance.exceptions import DomainError


class Bond:
    """
    Plain fixed-coupon bond paying level coupons and par at maturity.

    Coupons fall at regular intervals counted back from maturity; a partial
    first period counts as a full coupon period.

    Args:
        maturity_date: Date the par value is repaid.
        start_date: Valuation (settlement) date.
        coupon_rate: Annual coupon rate in percent (e.g., 5 for 5%).
        coupon_frequency: Coupons per year (1, 2, 4 or 12).
        par_value: Face value repaid at maturity.

    Example:
        >>> bond = Bond(date(2031, 1, 1), date(2021, 1, 1), coupon_rate=5)
        >>> bond.price(0.05)
        100.0  # approximately
    """

    VALID_FREQUENCIES = (1, 2, 4, 12)

    def __init__(
        self,
        maturity_date: date,
        start_date: date,
        coupon_rate: float = 5,
        coupon_frequency: int = 2,
        par_value: float = 100,
    ) -> None:
        """Initialize and validate bond terms."""
        if maturity_date <= start_date:
            raise DomainError(
                f"Maturity {maturity_date} must be after start {start_date}"
            )
        if coupon_frequency not in self.VALID_FREQUENCIES:
            raise DomainError(
                f"Invalid coupon frequency {coupon_frequency}. "
                f"Valid values: {list(self.VALID_FREQUENCIES)}"
            )

        self.maturity_date = maturity_date
        self.start_date = start_date
        self.coupon_rate = coupon_rate
        self.coupon_frequency = coupon_frequency
        self.par_value = par_value

    @property
    def periods(self) -> int:
        """Number of coupon periods left until maturity."""
        months = (self.maturity_date.year - self.start_date.year) * 12 + (
            self.maturity_date.month - self.start_date.month
        )
        if self.maturity_date.day > self.start_date.day:
            months += 1
        return math.ceil(months / (12 // self.coupon_frequency))

    @property
    def coupon_payment(self) -> float:
        """Coupon paid each period."""
        return self.par_value * self.coupon_rate / 100 / self.coupon_frequency

    def price(self, yield_rate: float) -> float:
        """
        Calculate the price of the bond for an annual yield.

        Args:
            yield_rate: Annual nominal yield as decimal (e.g., 0.05).

        Returns:
            Price in the same units as par_value.
        """
        periodic_yield = yield_rate / self.coupon_frequency
        return -present_value(
            periodic_yield, self.periods, self.coupon_payment, self.par_value
        )

    def yield_to_maturity(self, price: float) -> float:
        """
        Calculate the annual nominal yield implied by a price.

        With coupons this runs the secant IRR search on the bond's cash
        flows; a zero-coupon bond takes the closed form.

        Args:
            price: Price paid for the bond.

        Returns:
            Annual yield as decimal.

        Raises:
            DomainError: If price is not positive.
        """
        if price <= 0:
            raise DomainError(f"Bond price must be positive, got {price}")

        periodic_yield = rate(self.periods, -price, self.coupon_payment, self.par_value)
        return periodic_yield * self.coupon_frequency
