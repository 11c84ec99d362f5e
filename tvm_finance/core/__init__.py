"""Core TVM equations and cash flow engine."""

from tvm_finance.core.time_value import (
    annuity_factor,
    future_value,
    payment,
    periods,
    present_value,
    rate,
)
from tvm_finance.core.cash_flow import (
    CashFlowSeries,
    internal_rate_of_return,
    net_present_value,
)

__all__ = [
    "annuity_factor",
    "future_value",
    "payment",
    "periods",
    "present_value",
    "rate",
    "CashFlowSeries",
    "internal_rate_of_return",
    "net_present_value",
]
