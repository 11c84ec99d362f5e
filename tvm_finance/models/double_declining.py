"""Declining-balance depreciation (double-declining by default)."""

import numpy as np

from tvm_finance.exceptions import DomainError
from tvm_finance.interfaces.depreciation_schedule import DepreciationSchedule


class DoubleDeclining(DepreciationSchedule):
    """
    Declining-balance depreciation with a salvage floor.

    Each year the remaining book value is depreciated at rate percent of the
    straight-line rate (200 = double-declining, 150 = 150% declining),
    prorated by the months the asset is in service during that period.
    Expense stops once book value reaches the salvage value.

    Args:
        useful_life: Useful life in years.
        starting_value: Cost basis of the asset.
        start_month: Month the asset is placed in service (0-11).
        salvage_value: Book value floor.
        rate: Declining rate as a percentage of the straight-line rate.

    Example:
        >>> ddb = DoubleDeclining(10, 1000, start_month=4, salvage_value=200)
        >>> round(ddb.get_depreciation_expense(4), 2)
        88.75
    """

    def __init__(
        self,
        useful_life: int,
        starting_value: float,
        start_month: int = 0,
        salvage_value: float = 0.0,
        rate: float = 200,
    ) -> None:
        """Initialize the schedule; rate is needed before it is calculated."""
        if rate <= 0:
            raise DomainError(f"Declining rate must be positive, got {rate}")
        self.rate = rate
        super().__init__(useful_life, starting_value, salvage_value, start_month)

    def _calculate_schedule(self) -> np.ndarray:
        n_periods = self.useful_life + (1 if self.start_month else 0)
        months = self._months_in_service(n_periods)
        annual_rate = self.rate / 100 / self.useful_life

        expense = np.zeros(n_periods)
        book_value = self.starting_value
        for period in range(n_periods):
            declining = book_value * annual_rate * months[period] / self.MONTHS_PER_YEAR
            # Never depreciate below salvage
            expense[period] = min(declining, max(book_value - self.salvage_value, 0.0))
            book_value -= expense[period]

        return expense
