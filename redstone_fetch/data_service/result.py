from typing import Awaitable, Generic, Optional, TypeVar

import logging
from dataclasses import dataclass

from redstone_fetch.data_service.exceptions import ExternalServiceError

T = TypeVar("T")

logger = logging.getLogger("redstone_fetch.result")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a data service call: either a value or the service error."""

    value: Optional[T] = None
    error: Optional[ExternalServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if the call failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def fetch_result(awaitable: Awaitable[T]) -> ServiceResult[T]:
    """
    Await a data service call and capture service failures as a result.

    Only ExternalServiceError is captured, any other exception propagates.

    Args:
        awaitable: Pending data service call

    Returns:
        ServiceResult holding either the value or the error
    """
    try:
        value = await awaitable
    except ExternalServiceError as e:
        logger.debug(f"Data service call failed: {e}")
        return ServiceResult(error=e)
    return ServiceResult(value=value)
