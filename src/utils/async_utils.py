"""
UAS Bot - Async Utilities
=========================

Helpers for running post-response side effects (DMs, log posts,
channel announcements) without letting one failure hide another.

Usage:
    from src.utils.async_utils import gather_with_logging

    await gather_with_logging(
        ("DM User", send_dm()),
        ("Post Clock-Out Log", post_log()),
        context="Clock Out",
    )
"""

import asyncio
from typing import Tuple, Coroutine, Any, List, Optional

from src.core.logger import logger


async def gather_with_logging(
    *operations: Tuple[str, Coroutine[Any, Any, Any]],
    context: Optional[str] = None,
) -> List[Any]:
    """
    Run async operations concurrently and log each failure.

    Args:
        *operations: Tuples of (operation_name, coroutine).
        context: Optional context string for error logs.

    Returns:
        List of results, exceptions included as values.
    """
    names = [name for name, _ in operations]
    coros = [coro for _, coro in operations]

    results = await asyncio.gather(*coros, return_exceptions=True)

    for i, result in enumerate(results):
        if isinstance(result, Exception):
            error_details = [
                ("Operation", names[i]),
                ("Error Type", type(result).__name__),
                ("Error", str(result)[:100]),
            ]
            if context:
                error_details.insert(0, ("Context", context))

            logger.warning("Async Operation Failed", error_details)

    return results


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["gather_with_logging"]
