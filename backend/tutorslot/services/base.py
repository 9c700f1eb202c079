# backend/tutorslot/services/base.py
"""
Base Service Pattern for the tutoring reservation backend.

Provides common functionality for all service classes including:
- Transaction management
- Logging
- Error handling
- Performance monitoring
"""

from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import StorageException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


@dataclass
class OperationStats:
    """In-process timing summary for one service operation."""

    count: int = 0
    failures: int = 0
    total_time: float = 0.0
    max_time: float = 0.0

    def add(self, elapsed: float, success: bool) -> None:
        self.count += 1
        self.total_time += elapsed
        self.max_time = max(self.max_time, elapsed)
        if not success:
            self.failures += 1

    @property
    def avg_time(self) -> float:
        return self.total_time / self.count if self.count else 0.0


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session management
    - Logging
    - Transaction handling
    - Performance monitoring
    """

    # Keyed by service class name, then operation
    _stats: Dict[str, Dict[str, OperationStats]] = {}

    def __init__(self, db: Session):
        """
        Initialize base service.

        Args:
            db: Database session
        """
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self, operation: str = "transaction", entity_id: Optional[str] = None) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Usage:
            with self.transaction("cancel_reservation", reservation_id):
                # Do multiple operations
                ...
                # Note: commit is handled automatically

        Store failures are rolled back and re-raised as StorageException with
        the operation context; domain exceptions roll back and propagate as-is.
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed during {operation}: {str(e)}")
            self.db.rollback()
            raise StorageException(
                f"Database operation failed: {str(e)}",
                operation=operation,
                entity_id=entity_id,
            ) from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to time a service method.

        Usage:
            @BaseService.measure_operation("create_reservation")
            def create_reservation(self, ...):
                ...

        A method returning ``Err`` counts as a success here; only raised
        exceptions count as failures.
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                started = time.perf_counter()
                error_type: Optional[str] = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - started
                    self._record_operation(operation_name, elapsed, error_type)

            return cast(F, wrapper)

        return decorator

    def _record_operation(self, operation: str, elapsed: float, error_type: Optional[str]) -> None:
        service = self.__class__.__name__
        success = error_type is None
        BaseService._stats.setdefault(service, {}).setdefault(operation, OperationStats()).add(
            elapsed, success
        )

        # Only log if it's actually slow
        if elapsed > SLOW_OPERATION_SECONDS:
            self.logger.warning(f"Slow operation detected: {operation} took {elapsed:.2f}s")

        prometheus_metrics.record_service_operation(
            service=service,
            operation=operation,
            duration=elapsed,
            status="success" if success else "error",
            error_type=error_type,
        )

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log an operation with context.

        Args:
            operation: Operation name
            **context: Additional context to log
        """
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """Per-operation count, failures, average and max time for this service."""
        return {
            operation: {
                "count": stats.count,
                "failures": stats.failures,
                "avg_time": stats.avg_time,
                "max_time": stats.max_time,
            }
            for operation, stats in BaseService._stats.get(self.__class__.__name__, {}).items()
        }
