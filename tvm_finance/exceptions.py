"""Exception hierarchy for time-value-of-money and cash flow calculations."""


class FinanceError(Exception):
    """Base exception for tvm_finance errors."""

    pass


class DomainError(FinanceError, ValueError):
    """Raised when inputs fall outside the domain of a financial formula."""

    pass


class NonConvergence(FinanceError, ArithmeticError):
    """Raised when an iterative solver cannot reach its tolerance."""

    pass


class IndexOutOfRange(FinanceError, IndexError):
    """Raised when a cash flow or schedule index is outside its series."""

    pass
