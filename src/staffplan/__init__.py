from .config import Config, cfg
from .erlang import calculate_achievable, calculate_staffing
from .inputs import CalculationInputs, ErlangModel, StaffingModel
from .logging_config import configure_from_env, disable_logging, enable_console_logging
from .main import run_pipeline
from .memory_store import InMemoryStore
from .service import StaffingCalculationService
from .validation import validate_calculation_inputs

__version__ = "0.1.0"

__all__ = [
    "CalculationInputs",
    "Config",
    "ErlangModel",
    "InMemoryStore",
    "StaffingCalculationService",
    "StaffingModel",
    "calculate_achievable",
    "calculate_staffing",
    "cfg",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "run_pipeline",
    "validate_calculation_inputs",
]
