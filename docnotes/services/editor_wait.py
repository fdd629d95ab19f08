"""
Bounded wait for a document editor to become available.

Opening a document in a host is asynchronous: the editor view may appear
some time after the open request. This polls the host a fixed number of
times and gives up with EditorTimeoutError. Each sleep is a cancellation
point, and nothing needs cleaning up if the caller abandons the wait.
"""

import asyncio

from docnotes.core.host.base import DocumentHost, EditorHandle
from docnotes.utils.exceptions import EditorTimeoutError
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)


async def _poll(
    host: DocumentHost,
    max_attempts: int,
    poll_interval: float,
    document_identity: str | None,
) -> EditorHandle:
    for attempt in range(1, max_attempts + 1):
        editor = await host.get_active_editor()
        if editor is not None and (
            document_identity is None or editor.document_identity == document_identity
        ):
            if attempt > 1:
                logger.debug(f"Editor ready after {attempt} attempts")
            return editor
        if attempt < max_attempts:
            await asyncio.sleep(poll_interval)

    raise EditorTimeoutError(max_attempts, context={"document": document_identity})


async def wait_for_editor(
    host: DocumentHost,
    *,
    max_attempts: int = 10,
    poll_interval: float = 0.1,
    timeout: float | None = None,
    document_identity: str | None = None,
) -> EditorHandle:
    """
    Poll the host until an editor is available.

    Args:
        host: Document host to poll
        max_attempts: Number of polls before giving up
        poll_interval: Seconds between polls
        timeout: Optional overall deadline in seconds
        document_identity: Only accept an editor showing this document

    Returns:
        The active editor

    Raises:
        EditorTimeoutError: If no matching editor appeared in time
    """
    if timeout is None:
        return await _poll(host, max_attempts, poll_interval, document_identity)

    try:
        async with asyncio.timeout(timeout):
            return await _poll(host, max_attempts, poll_interval, document_identity)
    except TimeoutError as e:
        raise EditorTimeoutError(
            max_attempts, context={"document": document_identity, "timeout": timeout}
        ) from e
