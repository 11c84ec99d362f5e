"""Financial utility functions shared by the cash flow and schedule models."""

from tvm_finance.core.time_value import Number, future_value, present_value


def get_sign(number: float) -> int:
    """
    Classify the sign of an amount.

    Zero counts as positive: the rule is "equal to its absolute value".
    Payback and MIRR partitioning depend on this exact classification.

    Args:
        number: Amount to classify.

    Returns:
        1 for zero and positive amounts, -1 otherwise.
    """
    return 1 if number == abs(number) else -1


def discount(rate: float, periods: Number, amount: Number) -> Number:
    """
    Value today of an amount received after a number of periods.

    This is the TVM present value of a single future amount with the sign
    flipped back, so inflows stay positive and outflows negative.

    Example:
        >>> discount(0.08, 1, 108.0)
        100.0
    """
    return -present_value(rate, periods, 0.0, amount, False)


def compound(rate: float, periods: Number, amount: Number) -> Number:
    """Value of an amount today after growing for a number of periods."""
    return -future_value(rate, periods, amount, 0.0, False)

