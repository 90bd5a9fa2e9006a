"""
Structured logging for index builds, searches and initialization status.
"""

import logging
from typing import Any, Dict

from ..core.config import debug_enabled


class StructuredLogger:
    """Structured logger for retrieval operations."""

    def __init__(self, name: str = "catalog_rag"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_index_build(self, item_count: int, dimension: int = None, status: str = "success", details: Dict[str, Any] = None):
        """Log an embedding index build."""
        log_details = {"item_count": item_count}
        if dimension is not None:
            log_details["dimension"] = dimension
        if details:
            log_details.update(details)

        self.log_operation("index.build", status, log_details)

    def log_search(self, query: str, mode: str, result_count: int, details: Dict[str, Any] = None):
        """Log a catalog search."""
        log_details = {
            "query": query[:50] + "..." if len(query) > 50 else query,
            "mode": mode,
            "result_count": result_count
        }
        if details:
            log_details.update(details)

        self.log_operation(f"search.{mode}", "success", log_details)

    def log_status_event(self, stage: str, message: str):
        """Log an initialization status event."""
        self.logger.debug(f"Status: {stage} - {message}")

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
