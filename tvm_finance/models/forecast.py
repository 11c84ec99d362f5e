"""Exponential smoothing forecasts for time series data."""

from collections.abc import Iterable

import numpy as np

from tvm_finance.exceptions import DomainError


class Forecast:
    """
    Time series forecasting with exponential smoothing.

    Every method returns one fitted value per observation followed by the
    requested number of out-of-sample predictions.

    Args:
        time_series: Observations, oldest first.

    Example:
        >>> forecast = Forecast([10, 12, 14, 16])
        >>> forecast.double_exponential_smoothing(periods=2, alpha=1.0, beta=1.0)
        array([10., 12., 14., 16., 18., 20.])
    """

    def __init__(self, time_series: Iterable[float]) -> None:
        """Initialize with observed data."""
        self.time_series = np.asarray(list(time_series), dtype=np.float64)
        if len(self.time_series) == 0:
            raise DomainError("Forecast needs at least one observation")

    @staticmethod
    def _check_constant(name: str, value: float) -> None:
        if not 0 <= value <= 1:
            raise ValueError(f"{name} must be within [0, 1], got {value}")

    def exponential_smoothing(self, periods: int = 0, alpha: float = 0.5) -> np.ndarray:
        """
        Single exponential smoothing.

        Every observation enters the average, with weights falling off
        exponentially for older observations. Without a trend term the
        forecast is flat beyond the data.

        Args:
            periods: Number of periods to forecast beyond the data.
            alpha: Smoothing constant.

        Returns:
            Array of length len(time_series) + periods.
        """
        self._check_constant("alpha", alpha)
        data = self.time_series
        n = len(data)

        predictions = np.zeros(n + periods)
        predictions[0] = data[0]
        for i in range(1, n):
            predictions[i] = alpha * data[i - 1] + (1 - alpha) * predictions[i - 1]

        if periods:
            predictions[n:] = alpha * data[-1] + (1 - alpha) * predictions[n - 1]

        return predictions

    def double_exponential_smoothing(
        self,
        periods: int = 0,
        alpha: float = 0.5,
        beta: float = 0.5,
    ) -> np.ndarray:
        """
        Double exponential smoothing (Holt's linear trend method).

        Adds a trend component to single smoothing, which otherwise lags
        behind trending data.

        Args:
            periods: Number of periods to forecast beyond the data.
            alpha: Smoothing constant for the level.
            beta: Smoothing constant for the trend.

        Returns:
            Array of length len(time_series) + periods.
        """
        self._check_constant("alpha", alpha)
        self._check_constant("beta", beta)
        data = self.time_series
        n = len(data)

        level = np.zeros(n)
        trend = np.zeros(n)
        level[0] = data[0]
        for i in range(1, n):
            level[i] = alpha * data[i] + (1 - alpha) * (level[i - 1] + trend[i - 1])
            trend[i] = beta * (level[i] - level[i - 1]) + (1 - beta) * trend[i - 1]

        # Extrapolate the last level along the last trend
        horizon = np.arange(1, periods + 1)
        return np.concatenate([level, level[-1] + horizon * trend[-1]])
