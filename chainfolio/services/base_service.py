"""
Base service class for Chainfolio services.

This module provides a base class for all services with common
functionality for outcome capture, bounded concurrency, and logging.
"""

import asyncio
import time
from typing import Any, Awaitable, List, Optional, Sequence, Tuple, TypeVar

from chainfolio.clients.base_client import ClientFactory, default_client_factory
from chainfolio.logging_config import get_logger
from chainfolio.models.asset import Outcome
from chainfolio.utils.errors import ChainfolioError

T = TypeVar('T')


class BaseService:
    """
    Base service class with common functionality.

    This class provides:
    - Conversion of raised errors into tagged outcomes
    - Bounded concurrency for fan-out
    - Structured logging with an injectable logger
    - Timing of operations

    Services hold only immutable configuration; every call opens its own
    HTTP client through ``client_factory`` and closes it before returning.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None, logger=None):
        """
        Initialize the base service.

        Args:
            client_factory: Callable returning a fresh ``httpx.AsyncClient``
            logger: Optional structlog logger
        """
        self.client_factory = client_factory or default_client_factory()
        self.logger = logger or get_logger(self.__class__.__module__)

    async def capture(self, operation: str, coro: Awaitable[T], **context: Any) -> Outcome:
        """
        Await ``coro`` and wrap its result or error in an Outcome.

        Args:
            operation: Name of the operation, used in logs
            coro: The awaitable to execute
            **context: Extra fields bound into the log events

        Returns:
            Successful Outcome carrying the result, or a failed one carrying
            the error message and code
        """
        try:
            return Outcome.ok(await coro)
        except ChainfolioError as e:
            self.logger.warning(
                "operation_failed",
                operation=operation,
                error_code=e.code.value,
                error=e.message,
                **context
            )
            return Outcome.fail(e)
        except Exception as e:
            self.logger.exception("operation_crashed", operation=operation, error=str(e), **context)
            return Outcome.fail(f"{operation} failed: {e}")

    async def gather_with_concurrency(
        self,
        concurrency_limit: int,
        *tasks: Awaitable[Any],
        return_exceptions: bool = False
    ) -> List[Any]:
        """
        Execute tasks with a concurrency limit.

        Args:
            concurrency_limit: Maximum number of tasks to run concurrently
            tasks: Tasks to execute
            return_exceptions: Return raised exceptions in place of results

        Returns:
            List of results, in the order the tasks were given
        """
        semaphore = asyncio.Semaphore(concurrency_limit)

        async def _wrapped_task(task):
            async with semaphore:
                return await task

        return await asyncio.gather(
            *[_wrapped_task(task) for task in tasks],
            return_exceptions=return_exceptions
        )

    def merge_outcomes(self, parts: Sequence[Tuple[str, Outcome]], **context: Any) -> Outcome:
        """
        Concatenate the data of labelled sub-fetch outcomes.

        Failed parts become warnings on the merged outcome. The merge only
        fails when every part failed.

        Args:
            parts: ``(label, outcome)`` pairs in output order
            **context: Extra fields bound into the log events

        Returns:
            Outcome carrying the concatenated list of results
        """
        data: List[Any] = []
        warnings: List[str] = []
        for label, outcome in parts:
            if outcome.success:
                if isinstance(outcome.data, list):
                    data.extend(outcome.data)
                elif outcome.data is not None:
                    data.append(outcome.data)
                warnings.extend(outcome.warnings)
            else:
                self.logger.warning("sub_fetch_failed", part=label, error=outcome.error, **context)
                warnings.append(f"{label}: {outcome.error}")

        if parts and all(not outcome.success for _, outcome in parts):
            first = parts[0][1]
            return Outcome(
                success=False,
                error="; ".join(warnings),
                error_code=first.error_code,
            )
        return Outcome.ok(data, warnings=warnings)

    def log_timing(self, operation_name: str, **context: Any) -> "TimingContextManager":
        """
        Create a context manager to log timing information.

        Args:
            operation_name: Name of the operation
            **context: Extra fields bound into the log events

        Returns:
            Timing context manager
        """
        return TimingContextManager(operation_name, self.logger.bind(**context))


class TimingContextManager:
    """Async context manager logging how long an operation took."""

    def __init__(self, operation_name: str, logger):
        self.operation_name = operation_name
        self.logger = logger
        self.start_time = 0.0

    async def __aenter__(self) -> "TimingContextManager":
        self.start_time = time.perf_counter()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = round(time.perf_counter() - self.start_time, 3)
        if exc_val is not None:
            self.logger.error("operation_timing", operation=self.operation_name, elapsed_s=elapsed, error=str(exc_val))
        else:
            self.logger.info("operation_timing", operation=self.operation_name, elapsed_s=elapsed)
