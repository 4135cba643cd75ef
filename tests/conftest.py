import asyncio
import os
import socket
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test runs from writing logs/ into the working tree
os.environ.setdefault("FCHAT_LOG_DIR", str(Path(tempfile.gettempdir()) / "fchat-test-logs"))


class DummyWebSocket:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self) -> None:
        self.sent_messages: List[str] = []
        self.closed = False
        self.close_code: Optional[int] = None
        self.send_error: Optional[BaseException] = None
        self.close_error: Optional[BaseException] = None
        self._queue: Optional[asyncio.Queue] = None

    async def send(self, data: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent_messages.append(data)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True
        self.close_code = code
        self.push_end()

    @property
    def _incoming(self) -> asyncio.Queue:
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    # Frames handed to the reader task started by ChatSocket.start()
    def push(self, frame) -> None:
        self._incoming.put_nowait(frame)

    def push_end(self, error: Optional[BaseException] = None) -> None:
        self._incoming.put_nowait(error if error is not None else StopAsyncIteration())

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._incoming.get()
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def dummy_ws() -> DummyWebSocket:
    return DummyWebSocket()


@pytest.fixture(autouse=True)
def clean_fchat_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("FCHAT_") and name != "FCHAT_LOG_DIR":
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
