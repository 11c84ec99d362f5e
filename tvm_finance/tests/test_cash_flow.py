"""Tests for CashFlowSeries and the secant IRR solver."""

import math

import numpy as np
import pytest
from scipy import optimize

from tvm_finance.core import cash_flow
from tvm_finance.core.cash_flow import (
    CashFlowSeries,
    internal_rate_of_return,
    net_present_value,
)
from tvm_finance.exceptions import DomainError, IndexOutOfRange, NonConvergence
from tvm_finance.utils.financial_utils import compound, discount, get_sign


@pytest.fixture
def project() -> CashFlowSeries:
    """Investment of 1000 returning 300 a period for four periods."""
    return CashFlowSeries([-1000, 300, 300, 300, 300], rate=0.08)


class TestHelpers:
    """Tests for sign rule and single-flow discounting."""

    def test_sign_rule(self) -> None:
        """Test zero counts as positive."""
        assert get_sign(5.0) == 1
        assert get_sign(0.0) == 1
        assert get_sign(-0.0) == 1
        assert get_sign(-3.0) == -1

    def test_discount_and_compound(self) -> None:
        """Test single amounts keep their sign."""
        assert discount(0.08, 1, 108.0) == pytest.approx(100.0)
        assert discount(0.08, 0, -50.0) == pytest.approx(-50.0)
        assert compound(0.1, 2, -100.0) == pytest.approx(-121.0)

    def test_net_present_value_function(self) -> None:
        """Test module-level NPV."""
        assert net_present_value([100, 110], 0.1) == pytest.approx(200.0)
        assert net_present_value(np.array([-100.0, 50.0, 50.0]), 0.0) == 0.0


class TestCashFlowSeriesInit:
    """Tests for construction and accessors."""

    def test_empty_series(self) -> None:
        """Test a series needs at least one flow."""
        with pytest.raises(DomainError):
            CashFlowSeries([])

    def test_default_rate(self) -> None:
        """Test default discount rate of 8%."""
        assert CashFlowSeries([-100, 110]).rate == pytest.approx(0.08)

    def test_get_cash_flow(self, project: CashFlowSeries) -> None:
        """Test index access."""
        assert project.get_cash_flow(0) == -1000.0
        assert project.get_cash_flow(4) == 300.0
        assert len(project) == 5

    def test_get_cash_flow_out_of_range(self, project: CashFlowSeries) -> None:
        """Test indices outside the series."""
        with pytest.raises(IndexOutOfRange):
            project.get_cash_flow(5)
        with pytest.raises(IndexError):
            project.get_cash_flow(-1)

    def test_cash_flows_is_copy(self, project: CashFlowSeries) -> None:
        """Test the array view cannot mutate the series."""
        flows = project.cash_flows
        flows[0] = 0.0
        assert project.get_cash_flow(0) == -1000.0

    def test_unknown_solver_setting(self) -> None:
        """Test unknown solver settings are rejected."""
        with pytest.raises(ValueError, match="Unknown solver settings"):
            CashFlowSeries([-100, 110], solver_config={"tol": 1e-3})


class TestNetPresentValue:
    """Tests for NPV."""

    def test_project_npv(self, project: CashFlowSeries) -> None:
        """Test NPV at 8%."""
        # 300 × 3.312127 - 1000
        assert project.net_present_value() == pytest.approx(-6.362, abs=1e-3)

    def test_npv_at_zero(self, project: CashFlowSeries) -> None:
        """Test NPV at zero rate is the plain sum."""
        assert project.net_present_value_at(0.0) == pytest.approx(200.0)

    def test_single_flow(self) -> None:
        """Test the first flow is not discounted."""
        assert CashFlowSeries([-250]).net_present_value() == -250.0


class TestPayback:
    """Tests for payback and discounted payback."""

    def test_payback(self, project: CashFlowSeries) -> None:
        """Test payback with interpolation inside the flipping period."""
        assert project.payback() == pytest.approx(3 + 100 / 300)

    def test_payback_positive_start(self) -> None:
        """Test payback of a series starting with an inflow."""
        series = CashFlowSeries([1000, -300, -300, -300, -300])
        assert series.payback() == pytest.approx(3 + 100 / 300)

    def test_payback_net_reaches_zero(self) -> None:
        """Test a running net of exactly zero counts as a sign change."""
        series = CashFlowSeries([-100, 50, 50, 10])
        assert series.payback() == pytest.approx(2.0)

    def test_payback_zero_first_flow(self) -> None:
        """Test zero first flow is classified positive."""
        series = CashFlowSeries([0, -5, 10])
        assert series.payback() == 0.0

    def test_no_payback(self) -> None:
        """Test no sign change raises instead of returning a number."""
        series = CashFlowSeries([-1000, 100, 100])
        with pytest.raises(DomainError, match="No payback"):
            series.payback()

    def test_single_flow_no_payback(self) -> None:
        """Test a single flow has no payback."""
        with pytest.raises(DomainError):
            CashFlowSeries([-1000]).payback()

    def test_discounted_payback(self) -> None:
        """Test payback of discounted flows."""
        series = CashFlowSeries([-1000, 500, 500, 500], rate=0.1)
        # 454.55 + 413.22 leave -132.23, recovered by 375.66 in period 3
        assert series.discounted_payback() == pytest.approx(2.3520, abs=1e-4)

    def test_discounted_payback_never_reached(self, project: CashFlowSeries) -> None:
        """Test negative NPV means no discounted payback."""
        with pytest.raises(DomainError):
            project.discounted_payback()


class TestInternalRateOfReturn:
    """Tests for the secant IRR solver."""

    def test_project_irr(self, project: CashFlowSeries) -> None:
        """Test IRR of the reference project."""
        assert project.internal_rate_of_return() == pytest.approx(0.0771, abs=0.002)

    @pytest.mark.parametrize(
        "flows",
        [
            [-1000, 300, 300, 300, 300],
            [-500, 200, 200, 200],
            [-100, 0, 0, 150],
            [-2000, 500, 800, 900, 400],
            [1000, -400, -400, -400],
        ],
    )
    def test_npv_at_irr_is_zero(self, flows: list[float]) -> None:
        """Test IRR is the root of NPV."""
        series = CashFlowSeries(flows)
        irr = series.internal_rate_of_return()
        assert abs(series.net_present_value_at(irr)) < 1e-6

    def test_closed_form_check(self) -> None:
        """Test IRR of a single reinvested amount."""
        series = CashFlowSeries([-100, 0, 0, 150])
        assert series.internal_rate_of_return() == pytest.approx(
            1.5 ** (1 / 3) - 1, abs=1e-8
        )

    @pytest.mark.parametrize("flows", [[100, 100, 100], [-100, -100, -100]])
    def test_no_sign_change_diverges(self, flows: list[float]) -> None:
        """Test series without sign change report the divergent sentinel."""
        assert CashFlowSeries(flows).internal_rate_of_return() == math.inf

    def test_flat_npv_does_not_converge(self) -> None:
        """Test a vanishing secant denominator raises NonConvergence."""
        with pytest.raises(NonConvergence, match="secant step undefined"):
            CashFlowSeries([-100]).internal_rate_of_return()

    def test_iteration_cap(self) -> None:
        """Test the iteration cap stops the search."""
        series = CashFlowSeries(
            [-1000, 300, 300, 300, 300], solver_config={"max_iterations": 1}
        )
        with pytest.raises(NonConvergence, match="did not converge"):
            series.internal_rate_of_return()

    def test_custom_divergence_threshold(self) -> None:
        """Test a lower divergence threshold trips earlier."""
        series = CashFlowSeries(
            [100, 100, 100], solver_config={"divergence_threshold": 2.0}
        )
        assert series.internal_rate_of_return() == math.inf

    @pytest.mark.parametrize(
        "flows",
        [[-1000, 300, 300, 300, 300], [-2000, 500, 800, 900, 400], [-800, 0, 200, 900]],
    )
    def test_matches_bracketed_root(self, flows: list[float]) -> None:
        """Test the secant root agrees with a bracketed Brent search."""
        expected = optimize.brentq(lambda r: net_present_value(flows, r), -0.5, 1.0)
        assert internal_rate_of_return(flows) == pytest.approx(expected, abs=1e-8)

    def test_module_function_guess(self) -> None:
        """Test the solver converges from a different seed."""
        irr = internal_rate_of_return([-1000, 300, 300, 300, 300], guess=0.2)
        assert irr == pytest.approx(0.0771, abs=0.002)


class TestModifiedInternalRateOfReturn:
    """Tests for MIRR."""

    def test_project_mirr(self, project: CashFlowSeries) -> None:
        """Test MIRR compounds inflows at the series rate."""
        # (300 × 4.506112 / 1000)^(1/4) - 1
        assert project.modified_internal_rate_of_return() == pytest.approx(
            0.078278, abs=1e-5
        )

    def test_mirr_positive_start(self) -> None:
        """Test partitioning follows the sign of the first flow."""
        series = CashFlowSeries([1000, -300, -300, -300, -300], rate=0.08)
        assert series.modified_internal_rate_of_return() == pytest.approx(
            0.078278, abs=1e-5
        )

    def test_mirr_with_later_outflow(self) -> None:
        """Test later outflows are discounted with the investment."""
        series = CashFlowSeries([-1000, 600, -100, 700], rate=0.1)
        starting = -1000 - 100 / 1.21
        ending = 600 * 1.21 + 700
        expected = (ending / -starting) ** (1 / 3) - 1
        assert series.modified_internal_rate_of_return() == pytest.approx(expected)

    def test_mirr_single_flow(self) -> None:
        """Test MIRR needs two flows."""
        with pytest.raises(DomainError):
            CashFlowSeries([-1000]).modified_internal_rate_of_return()

    def test_mirr_one_sign(self) -> None:
        """Test MIRR needs flows of both signs."""
        with pytest.raises(DomainError):
            CashFlowSeries([-1000, -100]).modified_internal_rate_of_return()


class TestCaching:
    """Tests for memoisation and invalidation."""

    def test_results_are_memoised(
        self, project: CashFlowSeries, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test cached values are not recomputed."""
        npv = project.net_present_value()
        irr = project.internal_rate_of_return()

        def fail(*args: object, **kwargs: object) -> float:
            raise AssertionError("recomputed")

        monkeypatch.setattr(cash_flow, "net_present_value", fail)
        monkeypatch.setattr(cash_flow, "internal_rate_of_return", fail)

        assert project.net_present_value() == npv
        assert project.internal_rate_of_return() == irr

    def test_add_cash_flow_invalidates(self, project: CashFlowSeries) -> None:
        """Test appending a flow clears all results."""
        assert project.net_present_value() < 0
        with pytest.raises(DomainError):
            project.discounted_payback()

        project.add_cash_flow(300)

        assert len(project) == 6
        assert project.net_present_value() == pytest.approx(
            -6.362 + 300 / 1.08**5, abs=1e-3
        )
        assert project.discounted_payback() < 5
        assert project.payback() == pytest.approx(3 + 100 / 300)

    def test_rate_change_invalidates(self, project: CashFlowSeries) -> None:
        """Test changing the rate clears all results."""
        npv_8 = project.net_present_value()
        mirr_8 = project.modified_internal_rate_of_return()

        project.rate = 0.05

        assert project.net_present_value() > npv_8
        assert project.modified_internal_rate_of_return() < mirr_8

    def test_failures_are_not_cached(self) -> None:
        """Test a failed payback succeeds once the series recovers."""
        series = CashFlowSeries([-1000, 400, 400])
        with pytest.raises(DomainError):
            series.payback()

        series.add_cash_flow(400)
        assert series.payback() == pytest.approx(2.5)
