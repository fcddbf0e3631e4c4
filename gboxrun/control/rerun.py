"""Rerun composition: stop, settle, start.

Rerun is not a backend primitive. The start step is always attempted, even
when stop fails (nothing may have been running). The combined result is a
success whenever start succeeds; only when start fails does the caller see
both halves of the story.
"""

from __future__ import annotations

import asyncio
import logging

from gboxrun.control.controller import AppController
from gboxrun.core.types import ExecutionResult

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 1.0


async def rerun_app(
    controller: AppController,
    project_path: str | None = None,
    grace_period: float = DEFAULT_GRACE_PERIOD,
) -> ExecutionResult:
    """Stop the app, wait ``grace_period`` seconds, then start it again.

    Args:
        controller: Backend to drive.
        project_path: Optional project selector passed to both steps.
        grace_period: Seconds to let OS-level teardown settle.

    Returns:
        Start's message and configuration name on success; otherwise a
        failure carrying both the stop and start messages.
    """
    try:
        stop_result = await controller.stop(project_path)
        if not stop_result.success:
            logger.info("Rerun: stop step failed (%s), starting anyway", stop_result.message)

        if grace_period > 0:
            await asyncio.sleep(grace_period)

        start_result = await controller.start(project_path)
    except Exception as e:
        logger.error("Rerun error: %s", e, exc_info=True)
        return ExecutionResult(False, f"Rerun error: {e}")

    if start_result.success:
        return ExecutionResult(
            True,
            f"App rerun successful: {start_result.message}",
            start_result.configuration_name,
        )
    return ExecutionResult(
        False,
        f"Rerun failed - Stop: {stop_result.message}, Start: {start_result.message}",
    )
