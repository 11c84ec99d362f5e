"""Straight-line depreciation."""

import numpy as np

from tvm_finance.interfaces.depreciation_schedule import DepreciationSchedule


class StraightLine(DepreciationSchedule):
    """
    Linear depreciation of (starting - salvage) over the useful life.

    The annual amount is charged monthly, so the first and trailing periods
    carry only the months the asset is in service.
    """

    def _calculate_schedule(self) -> np.ndarray:
        n_periods = self.useful_life + (1 if self.start_month else 0)
        monthly = (self.starting_value - self.salvage_value) / (
            self.useful_life * self.MONTHS_PER_YEAR
        )
        return self._months_in_service(n_periods) * monthly
