"""Abstract interfaces for schedule generators."""

from tvm_finance.interfaces.depreciation_schedule import DepreciationSchedule

__all__ = ["DepreciationSchedule"]
