"""Convert service calls into status banners for the browser pages."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from core.exceptions import StorefrontError
from schemas.common import ActionResult

logger = logging.getLogger(__name__)


async def run_action(
    action: Callable[[], Awaitable[Any]],
    success_message: str,
    redirect: bool = False,
) -> tuple[ActionResult, Any]:
    """
    Await a single action and describe its outcome.

    Args:
        action: Zero-argument coroutine factory performing the action
        success_message: Banner text on success; the result ID is appended
        redirect: Whether the result carries a hosted page URL to follow

    Returns:
        The banner and the raw result (None on failure)
    """
    try:
        result = await action()
    except StorefrontError as e:
        logger.info(f"Action failed: {e.message}")
        return ActionResult(status="error", message=e.message), None
    except Exception as e:
        logger.error(f"Unexpected error during action: {e}", exc_info=True)
        return ActionResult(status="error", message="An error occurred"), None

    resource_id = getattr(result, "id", None)
    message = success_message
    if resource_id:
        message = f"{success_message} (ID: {resource_id})"

    return (
        ActionResult(
            status="success",
            message=message,
            resource_id=resource_id,
            redirect_url=getattr(result, "url", None) if redirect else None,
        ),
        result,
    )
