"""Depreciation schedules, bonds and forecasts built on the core engine."""

from tvm_finance.models.double_declining import DoubleDeclining
from tvm_finance.models.macrs import Macrs
from tvm_finance.models.straight_line import StraightLine
from tvm_finance.models.bond import Bond
from tvm_finance.models.forecast import Forecast

__all__ = [
    "DoubleDeclining",
    "Macrs",
    "StraightLine",
    "Bond",
    "Forecast",
]
