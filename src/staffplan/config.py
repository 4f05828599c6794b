from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Config:

    ### INTRADAY LAYOUT ###

    # Coverage is generated for one operating span per day (minutes from midnight)
    DEFAULT_SHIFT_START_MIN: int = 9 * 60
    DEFAULT_SHIFT_DURATION_MIN: int = 9 * 60

    ### COST ###

    HOURLY_RATE: float = 25.0

    ### ERLANG SOLVER ###

    # Agent search runs from ceil(traffic) to max(traffic * MULTIPLIER, MIN_UPPER)
    MAX_AGENTS_MULTIPLIER: int = 3
    MIN_AGENTS_SEARCH_UPPER: int = 10

    # Erlang X equilibrium loop
    EQUILIBRIUM_TOLERANCE: float = 1e-4
    EQUILIBRIUM_MAX_ITERATIONS: int = 100
    EQUILIBRIUM_INITIAL_ABANDONMENT: float = 0.05

    # Retrial behaviour of abandoned contacts (Erlang X)
    BASE_RETRIAL_RATE: float = 0.40
    MAX_RETRIAL_RATE: float = 0.70
    RETRIAL_FRUSTRATION_SLOPE: float = 0.15
    PATIENCE_SHAPE: float = 1.2

    # Erlang B sizing safety stop
    MAX_ERLANG_B_LINES: int = 10_000

    # Reported in place of an infinite ASA when evaluating a fixed roster
    UNSTABLE_ASA_SECONDS: float = 99999.0

    ### INPUT DEFAULTS ###

    DEFAULT_INTERVAL_MINUTES: int = 30
    DEFAULT_AHT_SECONDS: float = 240.0
    DEFAULT_SERVICE_LEVEL_PERCENT: float = 80.0
    DEFAULT_THRESHOLD_SECONDS: float = 20.0
    DEFAULT_SHRINKAGE_PERCENT: float = 25.0
    DEFAULT_MAX_OCCUPANCY_PERCENT: float = 90.0
    DEFAULT_AVERAGE_PATIENCE_SECONDS: float = 120.0

    ### VALIDATION LIMITS ###

    LIMITS: dict[str, tuple[float, float]] = field(
        default_factory=lambda: {
            "volume": (0, 100_000),
            "aht": (1, 7200),
            "target_sl_percent": (0, 100),
            "threshold_seconds": (1, 600),
            "shrinkage_percent": (0, 99),
            "max_occupancy": (50, 100),
            "average_patience": (10, 1800),
            "interval_minutes": (0, 60),
        }
    )

    # Week boundaries for weekly-hour accounting (0 = Monday, ISO)
    WEEK_START_WEEKDAY: int = 0

    SEED: Optional[int] = None

    def validate(self) -> None:
        """
        Validate the Config object has sensible values before running.
        """
        if not (0 <= self.DEFAULT_SHIFT_START_MIN < 24 * 60):
            raise ValueError("DEFAULT_SHIFT_START_MIN must be within one day.")
        if self.DEFAULT_SHIFT_DURATION_MIN <= 0:
            raise ValueError("DEFAULT_SHIFT_DURATION_MIN must be > 0.")
        if self.HOURLY_RATE < 0:
            raise ValueError("HOURLY_RATE must be non-negative.")
        if self.MAX_AGENTS_MULTIPLIER < 1 or self.MIN_AGENTS_SEARCH_UPPER < 1:
            raise ValueError("Agent search bounds must be >= 1.")
        if not (0.0 < self.EQUILIBRIUM_TOLERANCE < 1.0):
            raise ValueError("EQUILIBRIUM_TOLERANCE must be in (0, 1).")
        if self.EQUILIBRIUM_MAX_ITERATIONS <= 0:
            raise ValueError("EQUILIBRIUM_MAX_ITERATIONS must be > 0.")
        if not (0.0 <= self.BASE_RETRIAL_RATE <= self.MAX_RETRIAL_RATE <= 1.0):
            raise ValueError("Require 0 <= BASE_RETRIAL_RATE <= MAX_RETRIAL_RATE <= 1.")
        if self.PATIENCE_SHAPE <= 0:
            raise ValueError("PATIENCE_SHAPE must be > 0.")
        if not (0 <= self.WEEK_START_WEEKDAY <= 6):
            raise ValueError("WEEK_START_WEEKDAY must be within [0, 6].")
        for key, (lo, hi) in self.LIMITS.items():
            if lo > hi:
                raise ValueError(f"LIMITS[{key!r}] lower bound exceeds upper bound.")


cfg = Config()
