"""
Utilities package initialization.
"""
from .logger import get_logger, log_business_event, log_performance, setup_logging
from .result import Result

__all__ = ["get_logger", "log_business_event", "log_performance", "setup_logging", "Result"]
