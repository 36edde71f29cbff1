"""Run an operation under a timeout with classification and optional recovery."""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional, TypeVar

from .exceptions import OperationFailedError, SvgTimeoutError
from .handler import ErrorDetails, ErrorHandler
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class OperationBoundary:
    """
    Race an operation against a timer.

    The operation runs on a worker thread. If the timer wins, the worker's
    eventual result is discarded and SvgTimeoutError is raised. Python threads
    cannot be killed, so a runaway operation keeps its thread until it returns.
    """

    def __init__(self, error_handler: ErrorHandler, timeout_ms: float = 30000):
        self.error_handler = error_handler
        self.timeout_ms = timeout_ms

    def execute(
        self,
        operation: Callable[[], T],
        operation_name: str,
        recovery_fn: Optional[Callable[[ErrorDetails], Optional[T]]] = None,
    ) -> T:
        """
        Execute `operation` with error handling and timeout.

        Args:
            operation: Zero-argument callable to run.
            operation_name: Label used in error messages and the error log.
            recovery_fn: Called with the classified error when it is
                recoverable; a non-None return value is used as the result.

        Returns:
            The operation's (or the recovery function's) result.

        Raises:
            SvgTimeoutError: The timer won the race.
            OperationFailedError: The operation raised and was not recovered.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="svgslim-op")
        future = executor.submit(operation)
        try:
            return future.result(timeout=self.timeout_ms / 1000.0)
        except FutureTimeoutError:
            details = self.error_handler.handle_timeout_error(self.timeout_ms, operation_name)
            logger.warning(details.message)
            raise SvgTimeoutError(details.message, details) from None
        except Exception as error:
            if isinstance(error, MemoryError) or "memory" in str(error).lower():
                details = self.error_handler.handle_memory_error(0, 0)
            else:
                details = self.error_handler.handle_optimization_error(error, operation_name)

            if recovery_fn is not None and details.recoverable:
                try:
                    recovered = recovery_fn(details)
                except Exception as recovery_error:
                    logger.warning(f"Recovery failed for '{operation_name}': {recovery_error}")
                else:
                    if recovered is not None:
                        return recovered

            raise OperationFailedError(details.message, details) from error
        finally:
            executor.shutdown(wait=False)
