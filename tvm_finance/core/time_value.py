"""Closed-form time value of money equations for a regular annuity."""

import math

import numpy as np

from tvm_finance.exceptions import DomainError
from tvm_finance.templates.solver_defaults import RATE_GUESS

Number = float | np.ndarray


def annuity_factor(rate: float, due: bool = False) -> float:
    """
    Return the payment timing factor of the annuity equation.

    Args:
        rate: Periodic interest rate (e.g., 0.05 for 5%).
        due: True for payments at the start of each period (annuity-due),
            False for payments at the end (ordinary annuity).

    Returns:
        1 + rate for an annuity-due, 1 otherwise.
    """
    return 1 + rate if due else 1.0


def _check_rate(rate: float) -> None:
    """Reject rates at or below -100%, where (1 + rate)^n is meaningless."""
    if rate <= -1:
        raise DomainError(f"Rate must be greater than -100%, got {rate}")


def present_value(
    rate: float,
    periods: Number,
    payment: Number,
    future_value: Number,
    due: bool = False,
) -> Number:
    """
    Calculate the present value of an annuity and a terminal amount.

    All TVM functions solve the same relation

        pv·(1+r)^n + pmt·(1 + r·due)·((1+r)^n - 1)/r + fv = 0

    so money paid and money received carry opposite signs. Array arguments
    for periods, payment and future_value are evaluated element-wise.

    Args:
        rate: Periodic interest rate.
        periods: Number of periods.
        payment: Level payment per period.
        future_value: Amount at the end of the last period.
        due: Payments at period start (True) or period end (False).

    Returns:
        Present value.

    Example:
        >>> present_value(0.05, 10, 0, 1000)
        -613.91  # approximately
    """
    if rate == 0:
        return -(payment * periods + future_value)

    _check_rate(rate)
    annuity = payment * annuity_factor(rate, due) / rate
    return (annuity - future_value) / (1 + rate) ** periods - annuity


def future_value(
    rate: float,
    periods: Number,
    present_value: Number,
    payment: Number,
    due: bool = False,
) -> Number:
    """
    Calculate the future value of a present amount and an annuity.

    Args:
        rate: Periodic interest rate.
        periods: Number of periods.
        present_value: Amount at time zero.
        payment: Level payment per period.
        due: Payments at period start (True) or period end (False).

    Returns:
        Future value, with the sign opposite to the money invested.
    """
    if rate == 0:
        return -(present_value + payment * periods)

    _check_rate(rate)
    annuity = payment * annuity_factor(rate, due) / rate
    return annuity - (1 + rate) ** periods * (present_value + annuity)


def payment(
    rate: float,
    periods: float,
    present_value: float,
    future_value: float,
    due: bool = False,
) -> float:
    """
    Calculate the level payment that settles a present and future amount.

    Args:
        rate: Periodic interest rate.
        periods: Number of periods.
        present_value: Amount at time zero.
        future_value: Amount at the end of the last period.
        due: Payments at period start (True) or period end (False).

    Returns:
        Payment per period.

    Raises:
        DomainError: If periods is zero.

    Example:
        >>> payment(0.045, 15, 600000, 0)
        -55868.1  # approximately
    """
    if periods == 0:
        raise DomainError("Payment is undefined over zero periods")

    if rate == 0:
        return -(present_value + future_value) / periods

    _check_rate(rate)
    growth = (1 + rate) ** periods
    return (-rate / annuity_factor(rate, due)) * (
        present_value + (present_value + future_value) / (growth - 1)
    )


def periods(
    rate: float,
    present_value: float,
    payment: float,
    future_value: float,
    due: bool = False,
) -> float:
    """
    Calculate the number of periods needed to move between two amounts.

    Args:
        rate: Periodic interest rate.
        present_value: Amount at time zero.
        payment: Level payment per period.
        future_value: Amount at the end of the last period.
        due: Payments at period start (True) or period end (False).

    Returns:
        Number of periods (may be fractional).

    Raises:
        DomainError: If no number of periods satisfies the inputs, i.e. the
            logarithm argument is non-positive or undefined.
    """
    if rate == 0:
        if payment == 0:
            raise DomainError("Periods are undefined with zero rate and payment")
        return -(present_value + future_value) / payment

    _check_rate(rate)
    scaled_payment = payment * annuity_factor(rate, due)
    numerator = scaled_payment - future_value * rate
    denominator = scaled_payment + present_value * rate

    if denominator == 0:
        raise DomainError("Periods are undefined: annuity never reaches the target")

    ratio = numerator / denominator
    if ratio <= 0:
        raise DomainError(
            f"Periods are undefined: logarithm of non-positive value {ratio}"
        )

    return math.log(ratio) / math.log1p(rate)


def rate(
    periods: float,
    present_value: float,
    payment: float,
    future_value: float,
    due: bool = False,
    guess: float = RATE_GUESS,
) -> float:
    """
    Calculate the periodic rate that links the other four TVM variables.

    Without a payment the relation has the closed form
    (-fv/pv)^(1/n) - 1. With a payment there is no closed form: the inputs
    are laid out as a cash flow series and handed to the secant IRR solver
    in tvm_finance.core.cash_flow. This is the single place where the TVM
    primitives depend on the cash flow engine; the import is kept inside
    the function because cash_flow imports this module.

    Args:
        periods: Number of periods (whole periods when payment is non-zero).
        present_value: Amount at time zero.
        payment: Level payment per period.
        future_value: Amount at the end of the last period.
        due: Payments at period start (True) or period end (False).
        guess: Second seed of the secant search (the first is 0).

    Returns:
        Periodic rate as decimal. math.inf if the solver diverges.

    Raises:
        DomainError: If the inputs admit no real rate.
        NonConvergence: If the solver cannot reach its tolerance.
    """
    if periods <= 0:
        raise DomainError(f"Rate needs a positive number of periods, got {periods}")

    if payment == 0:
        if present_value == 0:
            raise DomainError("Rate is undefined for a zero present value")
        base = -future_value / present_value
        if base <= 0:
            raise DomainError(
                "Rate is undefined: present and future value must have "
                "opposite signs"
            )
        return base ** (1 / periods) - 1

    if not float(periods).is_integer():
        raise DomainError(
            f"Rate with a payment needs a whole number of periods, got {periods}"
        )

    from tvm_finance.core.cash_flow import internal_rate_of_return

    n = int(periods)
    flows = np.full(n + 1, float(payment))
    if due:
        flows[0] += present_value
        flows[-1] = future_value
    else:
        flows[0] = present_value
        flows[-1] += future_value

    return internal_rate_of_return(flows, guess=guess)
