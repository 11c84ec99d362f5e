"""Abstract interface for asset depreciation schedules."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from tvm_finance.exceptions import DomainError, IndexOutOfRange
from tvm_finance.utils.financial_utils import discount

logger = logging.getLogger(__name__)


class DepreciationSchedule(ABC):
    """
    Abstract interface for depreciation schedules.

    A schedule is indexed by fiscal period (year). Period 0 is the year the
    asset is placed in service at start_month (0 = January, 11 = December);
    when start_month is not January the last year of service spills into
    one extra period.

    Subclasses implement _calculate_schedule(), which runs once on
    construction and returns the per-period depreciation expense.

    Args:
        useful_life: Useful life in years.
        starting_value: Cost basis of the asset.
        salvage_value: Value left at the end of the useful life.
        start_month: Month the asset is placed in service (0-11).

    Example:
        >>> schedule = DoubleDeclining(10, 1000, start_month=4, salvage_value=200)
        >>> schedule.get_depreciation_expense(0)
        133.33  # approximately
        >>> schedule.get_accumulated_depreciation(8)
        800.0
    """

    MONTHS_PER_YEAR = 12

    def __init__(
        self,
        useful_life: int,
        starting_value: float,
        salvage_value: float = 0.0,
        start_month: int = 0,
    ) -> None:
        """Validate the asset parameters and build the schedule."""
        if useful_life <= 0:
            raise DomainError(f"Useful life must be positive, got {useful_life}")
        if not 0 <= start_month < self.MONTHS_PER_YEAR:
            raise DomainError(f"Start month must be within 0-11, got {start_month}")
        if salvage_value > starting_value:
            raise DomainError(
                f"Salvage value {salvage_value} exceeds starting value {starting_value}"
            )

        self.useful_life = useful_life
        self.starting_value = float(starting_value)
        self.salvage_value = float(salvage_value)
        self.start_month = start_month

        self._expense = np.asarray(self._calculate_schedule(), dtype=np.float64)
        self._accumulated = np.cumsum(self._expense)
        logger.debug(
            "%s schedule built: %d periods, total depreciation %.2f",
            type(self).__name__,
            len(self._expense),
            self._accumulated[-1],
        )

    @abstractmethod
    def _calculate_schedule(self) -> np.ndarray:
        """
        Calculate depreciation expense for every period.

        Returns:
            np.ndarray of shape (n_periods,) with expense per period.
        """
        raise NotImplementedError

    def _months_in_service(self, n_periods: int) -> np.ndarray:
        """
        Months of service falling in each period for a useful_life-year span.

        Args:
            n_periods: Length of the returned array.

        Returns:
            Array with 12 - start_month for period 0, 12 for full years and
            start_month for the trailing partial year.
        """
        total_months = self.useful_life * self.MONTHS_PER_YEAR
        months = np.zeros(n_periods)
        elapsed = 0
        for period in range(n_periods):
            available = self.MONTHS_PER_YEAR - (self.start_month if period == 0 else 0)
            months[period] = min(available, total_months - elapsed)
            elapsed += months[period]
        return months

    def _check_period(self, period: int) -> None:
        if not 0 <= period < self.n_periods:
            raise IndexOutOfRange(
                f"Period {period} outside schedule of {self.n_periods} periods"
            )

    @property
    def n_periods(self) -> int:
        """Number of fiscal periods in the schedule."""
        return len(self._expense)

    @property
    def schedule(self) -> dict[str, Any]:
        """
        Full schedule as arrays.

        Returns:
            Dictionary with depreciation_expense, accumulated_depreciation
            and book_value arrays of shape (n_periods,).
        """
        return {
            "depreciation_expense": self._expense.copy(),
            "accumulated_depreciation": self._accumulated.copy(),
            "book_value": self.starting_value - self._accumulated,
        }

    def get_depreciation_expense(self, period: int) -> float:
        """
        Get depreciation expense for a period.

        Raises:
            IndexOutOfRange: If period is outside the schedule.
        """
        self._check_period(period)
        return float(self._expense[period])

    def get_accumulated_depreciation(self, period: int) -> float:
        """
        Get depreciation accumulated up to and including a period.

        Raises:
            IndexOutOfRange: If period is outside the schedule.
        """
        self._check_period(period)
        return float(self._accumulated[period])

    def get_book_value(self, period: int) -> float:
        """Get the book value at the end of a period."""
        return self.starting_value - self.get_accumulated_depreciation(period)

    def present_value_of_expenses(self, rate: float) -> float:
        """
        Discount the expense stream to the start of period 0.

        Each period's expense is taken at the end of its period, so period
        k is discounted k + 1 periods.

        Args:
            rate: Periodic discount rate.

        Returns:
            Present value of all depreciation expense.
        """
        periods = np.arange(1, self.n_periods + 1)
        return float(np.sum(discount(rate, periods, self._expense)))
