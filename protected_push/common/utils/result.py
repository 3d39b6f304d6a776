"""Result wrapping for awaitables that are expected to fail sometimes.

Call sites branch on the returned pair instead of wrapping every step in
try/except::

    checks, error = await to(protection.required_status_checks(target))
    if error:
        ...
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, Iterator, Optional, Tuple, Type, TypeVar, Union

from protected_push.common.exception.exceptions import PushActionError

T = TypeVar("T")

EXPECTED_ERRORS: Tuple[Type[Exception], ...] = (PushActionError, OSError, asyncio.TimeoutError)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Two-armed outcome of a fallible operation: a value or an error."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Union[Optional[T], Optional[Exception]]]:
        yield self.value
        yield self.error


async def to(
    awaitable: Awaitable[T],
    errors: Tuple[Type[Exception], ...] = EXPECTED_ERRORS,
) -> Outcome[T]:
    """Await ``awaitable`` and capture an expected failure.

    Args:
        awaitable: Operation to run
        errors: Exception types treated as expected failures

    Returns:
        Outcome holding either the awaited value or the captured error.
        Anything not listed in ``errors`` (programming errors, cancellation)
        propagates.
    """
    try:
        return Outcome(value=await awaitable)
    except errors as e:
        return Outcome(error=e)
