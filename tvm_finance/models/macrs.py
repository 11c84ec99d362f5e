"""MACRS depreciation (half-year convention)."""

import numpy as np

from tvm_finance.exceptions import DomainError
from tvm_finance.interfaces.depreciation_schedule import DepreciationSchedule
from tvm_finance.templates.macrs_tables import MACRS_TABLES


class Macrs(DepreciationSchedule):
    """
    Modified Accelerated Cost Recovery System depreciation.

    Implements the 3, 5, 7, 10, 15 and 20 year schedules of IRS
    Publication 946 table A-1. Tables carry useful_life + 1 years because of
    the half-year convention. Each table year is spread evenly over twelve
    months starting at start_month, so it can straddle two fiscal periods.

    Args:
        useful_life: Recovery period in years (3, 5, 7, 10, 15 or 20).
        starting_value: Cost basis of the asset.
        salvage_value: Deducted from the basis before applying the table.
        start_month: Month the asset is placed in service (0-11).
    """

    def _calculate_schedule(self) -> np.ndarray:
        if self.useful_life not in MACRS_TABLES:
            raise DomainError(
                f"Invalid MACRS period: {self.useful_life}. "
                f"Valid values: {list(MACRS_TABLES.keys())}"
            )

        table = MACRS_TABLES[self.useful_life]
        depreciable_value = self.starting_value - self.salvage_value
        n_periods = len(table) + (1 if self.start_month else 0)

        monthly = np.zeros(n_periods * self.MONTHS_PER_YEAR)
        for year, percentage in enumerate(table):
            first = self.start_month + year * self.MONTHS_PER_YEAR
            monthly[first : first + self.MONTHS_PER_YEAR] = (
                depreciable_value * percentage / self.MONTHS_PER_YEAR
            )

        return monthly.reshape(n_periods, self.MONTHS_PER_YEAR).sum(axis=1)
