"""
Time value of money engine.

Closed-form annuity equations and analytics over irregular cash flows:
- Present value, future value, payment, periods and rate of an annuity
- NPV, payback, discounted payback, IRR and MIRR of a cash flow series
- Declining-balance, MACRS and straight-line depreciation schedules
- Bond pricing and yield, exponential smoothing forecasts
"""

from tvm_finance.core.time_value import (
    future_value,
    payment,
    periods,
    present_value,
    rate,
)
from tvm_finance.core.cash_flow import CashFlowSeries
from tvm_finance.exceptions import (
    DomainError,
    FinanceError,
    IndexOutOfRange,
    NonConvergence,
)

__version__ = "1.0.0"
__all__ = [
    "CashFlowSeries",
    "DomainError",
    "FinanceError",
    "IndexOutOfRange",
    "NonConvergence",
    "future_value",
    "payment",
    "periods",
    "present_value",
    "rate",
]
