"""Cash flow series analytics: NPV, payback, IRR and MIRR."""

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

import numpy as np

from tvm_finance.core.time_value import rate as solve_rate
from tvm_finance.exceptions import DomainError, IndexOutOfRange, NonConvergence
from tvm_finance.templates.solver_defaults import DEFAULT_DISCOUNT_RATE, SOLVER_DEFAULTS
from tvm_finance.utils.financial_utils import compound, discount, get_sign

logger = logging.getLogger(__name__)


def net_present_value(cash_flows: Iterable[float] | np.ndarray, rate: float) -> float:
    """
    Calculate Net Present Value with end-of-period convention.

    The flow at index k is discounted k periods, so index 0 is taken at
    face value.

    Args:
        cash_flows: Cash flows (period 0 to n-1).
        rate: Periodic discount rate.

    Returns:
        NPV as float.
    """
    flows = np.asarray(cash_flows, dtype=np.float64)
    return float(np.sum(discount(rate, np.arange(len(flows)), flows)))


def _solver_npv(flows: np.ndarray, rate: float) -> float:
    """NPV for the secant search; failures become NonConvergence."""
    try:
        value = net_present_value(flows, rate)
    except DomainError as e:
        raise NonConvergence(f"IRR search left the valid rate range: {e}") from e

    if not math.isfinite(value):
        raise NonConvergence(f"NPV is not finite at rate {rate}")
    return value


def internal_rate_of_return(
    cash_flows: Iterable[float] | np.ndarray,
    guess: float = DEFAULT_DISCOUNT_RATE,
    tolerance: float = SOLVER_DEFAULTS["tolerance"],
    divergence_threshold: float = SOLVER_DEFAULTS["divergence_threshold"],
    max_iterations: int = SOLVER_DEFAULTS["max_iterations"],
) -> float:
    """
    Calculate Internal Rate of Return using the secant method.

    The search is seeded with rates 0 and guess and stops once
    |NPV| < tolerance. A rate estimate above divergence_threshold means
    the NPV has no root the secant can reach (typically a series without
    a sign change) and is reported as math.inf.

    Args:
        cash_flows: Cash flow series, investment at index 0.
        guess: Second seed rate.
        tolerance: Convergence bound on |NPV|.
        divergence_threshold: Rate above which the search is divergent.
        max_iterations: Upper bound on secant steps.

    Returns:
        IRR as decimal (e.g., 0.08 for 8%), or math.inf on divergence.

    Raises:
        NonConvergence: If the secant denominator vanishes, the NPV becomes
            undefined, or max_iterations is exhausted.
    """
    flows = np.asarray(cash_flows, dtype=np.float64)

    rate_prev = 0.0
    npv_prev = _solver_npv(flows, rate_prev)
    rate_curr = float(guess)
    npv_curr = _solver_npv(flows, rate_curr)

    iterations = 0
    while abs(npv_curr) >= tolerance:
        if iterations >= max_iterations:
            raise NonConvergence(
                f"IRR did not converge within {max_iterations} iterations "
                f"(last rate {rate_curr}, NPV {npv_curr})"
            )
        if npv_curr == npv_prev:
            raise NonConvergence(
                f"IRR secant step undefined: NPV is {npv_curr} at both "
                f"{rate_prev} and {rate_curr}"
            )

        rate_next = rate_curr - npv_curr * (rate_curr - rate_prev) / (
            npv_curr - npv_prev
        )
        rate_prev, npv_prev = rate_curr, npv_curr
        rate_curr = rate_next
        iterations += 1

        if rate_curr > divergence_threshold:
            logger.warning(
                "IRR diverged past %s after %d iterations",
                divergence_threshold,
                iterations,
            )
            return math.inf

        npv_curr = _solver_npv(flows, rate_curr)
        logger.debug(
            "IRR iteration %d: rate=%.10f npv=%.10f", iterations, rate_curr, npv_curr
        )

    logger.debug("IRR converged to %.10f after %d iterations", rate_curr, iterations)
    return rate_curr


class CashFlowSeries:
    """
    Irregular series of cash flows with a single periodic discount rate.

    Positive amounts are inflows, negative amounts outflows; index 0 is the
    flow at time zero. Derived values are computed on first access and
    memoised. Appending a flow or changing the rate clears all of them.

    Instances are not synchronised: callers sharing one between threads
    must serialise mutations themselves.

    Args:
        cash_flows: Initial flows, at least one.
        rate: Periodic discount rate (e.g., 0.08 for 8%).
        solver_config: Overrides for the IRR solver settings
            ('tolerance', 'divergence_threshold', 'max_iterations').

    Example:
        >>> series = CashFlowSeries([-1000, 300, 300, 300, 300], rate=0.08)
        >>> series.payback()
        3.3333333333333335
        >>> series.internal_rate_of_return()
        0.0771  # approximately
    """

    def __init__(
        self,
        cash_flows: Iterable[float],
        rate: float = DEFAULT_DISCOUNT_RATE,
        solver_config: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the series from flows, rate and solver overrides."""
        flows = [float(cf) for cf in cash_flows]
        if not flows:
            raise DomainError("A cash flow series needs at least one flow")

        self._cash_flows = flows
        self._rate = float(rate)
        self.solver_config = self._apply_solver_defaults(solver_config or {})
        # Absent key: not computed yet
        self._cache: dict[str, float] = {}

    @staticmethod
    def _apply_solver_defaults(config: dict[str, Any]) -> dict[str, Any]:
        """Merge solver overrides over the template defaults."""
        unknown = set(config) - set(SOLVER_DEFAULTS)
        if unknown:
            raise ValueError(
                f"Unknown solver settings {sorted(unknown)}. "
                f"Available: {list(SOLVER_DEFAULTS.keys())}"
            )
        return {**SOLVER_DEFAULTS, **config}

    def _invalidate_calculations(self) -> None:
        self._cache.clear()

    def _cached(self, key: str, compute: Callable[[], float]) -> float:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    # Accessors and mutators

    @property
    def rate(self) -> float:
        """Periodic discount rate."""
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        self._rate = float(value)
        self._invalidate_calculations()

    @property
    def cash_flows(self) -> np.ndarray:
        """Copy of the flows as a numpy array."""
        return np.array(self._cash_flows, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._cash_flows)

    def add_cash_flow(self, amount: float) -> None:
        """
        Append a cash flow to the end of the series.

        Args:
            amount: Flow for the period after the current last one.
        """
        self._cash_flows.append(float(amount))
        self._invalidate_calculations()

    def get_cash_flow(self, index: int) -> float:
        """
        Get the cash flow of a period.

        Args:
            index: Period index (0-based).

        Returns:
            Amount of the flow.

        Raises:
            IndexOutOfRange: If index is outside 0..len-1.
        """
        if not 0 <= index < len(self._cash_flows):
            raise IndexOutOfRange(
                f"Cash flow index {index} outside series of length "
                f"{len(self._cash_flows)}"
            )
        return self._cash_flows[index]

    # Calculated values

    def net_present_value(self) -> float:
        """Return the NPV of the series at the series rate."""
        return self._cached(
            "npv", lambda: net_present_value(self._cash_flows, self._rate)
        )

    def net_present_value_at(self, rate: float) -> float:
        """Return the NPV of the series at an arbitrary rate (not cached)."""
        return net_present_value(self._cash_flows, rate)

    def payback(self) -> float:
        """
        Return the payback period of the series.

        That is the number of periods that elapse until the running net of
        the flows changes sign, with linear interpolation inside the period
        where the change happens.

        Raises:
            DomainError: If the running net never changes sign.
        """
        return self._cached("payback", lambda: self._payback_walk(lambda k, cf: cf))

    def discounted_payback(self) -> float:
        """
        Return the discounted payback period of the series.

        Same as payback(), but each flow is discounted to time zero at the
        series rate before it is added to the running net.

        Raises:
            DomainError: If the discounted running net never changes sign.
        """
        return self._cached(
            "discounted_payback",
            lambda: self._payback_walk(lambda k, cf: discount(self._rate, k, cf)),
        )

    def _payback_walk(self, adjust: Callable[[int, float], float]) -> float:
        """Walk the running net until its sign flips."""
        net = self._cash_flows[0]
        sign = get_sign(net)
        payback = 0.0

        for k, flow in enumerate(self._cash_flows[1:], start=1):
            flow = adjust(k, flow)
            if get_sign(net + flow) == sign:
                net += flow
                payback += 1
            else:
                # Sign flips inside this period: add the fractional part
                return payback - net / flow

        raise DomainError(
            f"No payback within the {len(self._cash_flows)} flows of the series"
        )

    def internal_rate_of_return(self) -> float:
        """
        Return the internal rate of return, seeded with the series rate.

        Returns:
            IRR as decimal, or math.inf if the search diverges.

        Raises:
            NonConvergence: If the secant search breaks down.
        """
        return self._cached(
            "irr",
            lambda: internal_rate_of_return(
                self._cash_flows, guess=self._rate, **self.solver_config
            ),
        )

    def modified_internal_rate_of_return(self) -> float:
        """
        Return the modified internal rate of return.

        Flows with the same sign as the first flow are discounted to time
        zero, flows of the opposite sign are compounded to the last period,
        both at the series rate. MIRR is the rate linking the two sums.

        Raises:
            DomainError: If the series has a single flow or no flow of the
                opposite sign.
        """
        return self._cached("mirr", self._calculate_mirr)

    def _calculate_mirr(self) -> float:
        n_periods = len(self._cash_flows) - 1
        if n_periods == 0:
            raise DomainError("MIRR needs at least two cash flows")

        sign = get_sign(self._cash_flows[0])
        starting_flows = 0.0
        ending_flows = 0.0
        for k, flow in enumerate(self._cash_flows):
            if get_sign(flow) == sign:
                starting_flows += discount(self._rate, k, flow)
            else:
                ending_flows += compound(self._rate, n_periods - k, flow)

        if ending_flows == 0:
            raise DomainError("MIRR needs flows of both signs")

        return solve_rate(n_periods, starting_flows, 0.0, ending_flows)
