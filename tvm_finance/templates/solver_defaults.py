"""Default discount rate and secant solver settings."""

from typing import Any

DEFAULT_DISCOUNT_RATE = 0.08

# Seed used when rate() falls back to the IRR solver
RATE_GUESS = 0.1

SOLVER_DEFAULTS: dict[str, Any] = {
    "tolerance": 1e-6,  # |NPV| below this is a root
    "divergence_threshold": 1000.0,  # 100,000% per period
    "max_iterations": 1000,
}
