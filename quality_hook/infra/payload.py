"""Claude Code PostToolUse payload intake.

Claude Code pipes a JSON object to the hook's stdin:

    {"tool_name": "Edit", "tool_input": {"file_path": "/repo/src/app.ts", ...}}

Reading is bounded: if stdin does not reach EOF in time the payload is
treated as ``{}``, which the CLI turns into a no-op success.
"""

from __future__ import annotations

import asyncio
import json
import threading
from dataclasses import dataclass
from typing import IO, Any

SUPPORTED_OPERATIONS = frozenset({"Write", "Edit", "MultiEdit"})

EMPTY_PAYLOAD = "{}"


class PayloadError(Exception):
    """Raised when the hook payload is malformed or incomplete."""

    pass


@dataclass(frozen=True)
class HookPayload:
    """The fields of a PostToolUse payload the hook needs.

    Attributes:
        tool_name: The tool the agent used ("Write", "Edit", "MultiEdit", ...).
        file_path: The file the tool touched.
    """

    tool_name: str
    file_path: str

    @property
    def file_name(self) -> str:
        return self.file_path.rsplit("/", 1)[-1]

    def should_process(self) -> bool:
        return self.tool_name in SUPPORTED_OPERATIONS


def parse_payload(raw: str) -> HookPayload:
    """Parse and validate a payload string.

    Raises:
        PayloadError: If the JSON is invalid or required fields are missing.
    """
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Invalid payload format: {e}") from e
    return payload_from_mapping(data)


def payload_from_mapping(data: Any) -> HookPayload:
    """Build a HookPayload from an already-decoded payload object."""
    if not isinstance(data, dict):
        raise PayloadError("Payload must be a JSON object")
    tool_name = data.get("tool_name")
    tool_input = data.get("tool_input")
    file_path = tool_input.get("file_path") if isinstance(tool_input, dict) else None
    if not isinstance(tool_name, str) or not tool_name:
        raise PayloadError("Payload is missing tool_name")
    if not isinstance(file_path, str) or not file_path:
        raise PayloadError("Payload is missing tool_input.file_path")
    return HookPayload(tool_name=tool_name, file_path=file_path)


async def read_payload(stream: IO[str], timeout: float) -> str:
    """Read the whole stream, or return ``"{}"`` after ``timeout`` seconds.

    The blocking read runs on a daemon thread so a stdin that never closes
    cannot keep the process alive after the timeout.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _deliver(data: str) -> None:
        if not future.done():
            future.set_result(data)

    def _read() -> None:
        try:
            data = stream.read()
        except (OSError, ValueError):
            data = EMPTY_PAYLOAD
        try:
            loop.call_soon_threadsafe(_deliver, data)
        except RuntimeError:
            # Loop already closed after a timeout
            return

    threading.Thread(target=_read, name="payload-reader", daemon=True).start()
    try:
        return await asyncio.wait_for(future, timeout=timeout)
    except asyncio.TimeoutError:
        return EMPTY_PAYLOAD
