# Storefront Pricing Monitoring Configuration
# Prometheus metrics and logging setup

import logging
import time
from typing import Optional
from prometheus_client import Counter, Histogram

from .config import settings

# Metrics
calculation_count = Counter(
    'cart_calculations_total', 'Total cart calculations', ['operation', 'outcome']
)
calculation_duration = Histogram(
    'cart_calculation_duration_seconds', 'Cart calculation duration', ['operation']
)
calculation_warnings = Counter(
    'cart_calculation_warnings_total', 'Warnings reported by cart calculations', ['code']
)

def setup_logging(log_level: Optional[str] = None):
    """Configure logging for the pricing engine"""

    level = (log_level or settings.LOG_LEVEL).upper()

    formatter = logging.Formatter(settings.LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        handlers=[console_handler]
    )

    # Calculations log every line at debug; keep that out of production
    if settings.ENVIRONMENT == "production":
        logging.getLogger("storefront_pricing.services").setLevel(logging.INFO)

logger = logging.getLogger(__name__)

def log_calculation(operation: str, duration: float, success: bool = True):
    """Log a calculation with metrics"""
    if settings.METRICS_ENABLED:
        calculation_count.labels(
            operation=operation,
            outcome="success" if success else "failure"
        ).inc()
        calculation_duration.labels(operation=operation).observe(duration)

    if success:
        logger.debug(f"Calculation {operation} completed in {duration:.6f}s")
    else:
        logger.error(f"Calculation {operation} failed after {duration:.6f}s")

def record_warning(code: str):
    """Count a calculation warning"""
    if settings.METRICS_ENABLED:
        calculation_warnings.labels(code=code).inc()

class CalculationContext:
    def __init__(self, operation: str):
        self.operation = operation
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time
        log_calculation(self.operation, duration, exc_type is None)
        return False
