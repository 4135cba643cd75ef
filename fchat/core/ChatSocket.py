from __future__ import annotations
import asyncio
from collections import deque
from contextlib import suppress
from enum import Enum
from typing import Any, Deque, Optional, Union

import websockets

from shared.frame import Message, decode_frame, encode_frame
from shared.log import get_logger

logger = get_logger(__name__)

# Text frame, or a binary frame still holding undecoded UTF-8
Frame = Union[str, bytes]


class ConnectFailure(Exception):
    """Raised when the chat socket closes or errors before it is established."""
    pass


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ChatSocket:
    """
    Wraps a WebSocket connection and turns it into an ordered reader/writer
    of chat messages.

    Transport events (frame arrived, connection closed or failed) are pushed
    in through on_message()/on_close() by a reader task; consumers pull with
    read(). Two queues hold whichever side is ahead:

    - _frames:  frames that arrived with nobody waiting for them
    - _waiters: reads issued before any frame was available

    At most one of them is non-empty at a time. Once the connection is
    closed, read() returns None for every pending and future call, after
    the frames that were already buffered have been handed out.

    All queue mutation happens on the event loop thread, so no locks.
    """

    def __init__(self, websocket: Any) -> None:
        self.websocket = websocket
        self._frames: Deque[Frame] = deque()
        self._waiters: Deque[asyncio.Future] = deque()
        self._state = ConnectionState.CONNECTING
        self._reader: Optional[asyncio.Task] = None

    @classmethod
    async def open(cls, url: str, *, ping_interval: Optional[float] = 15,
                   ping_timeout: Optional[float] = 45) -> ChatSocket:
        """Connect to the chat server and start pumping frames"""
        logger.info("Connecting to chat socket at %s...", url)
        try:
            websocket = await websockets.connect(url, ping_interval=ping_interval, ping_timeout=ping_timeout)
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            raise ConnectFailure(f"Connection to {url} failed: {e}") from e

        chat_socket = cls(websocket)
        chat_socket.start()
        logger.info("Connected to chat socket.")
        return chat_socket

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    def start(self) -> None:
        """Mark the connection established and spawn the reader task"""
        if self._state is not ConnectionState.CONNECTING:
            return
        self._state = ConnectionState.OPEN
        self._reader = asyncio.create_task(self._pump())

    async def _pump(self) -> None:
        error: Optional[BaseException] = None
        try:
            # Frames are decoded by read(), so a bad frame fails only its reader
            async for raw in self.websocket:
                self.on_message(raw)
        except websockets.exceptions.ConnectionClosedError as e:
            error = e
        except Exception as e:
            logger.exception("Chat socket reader failed")
            error = e
        finally:
            self.on_close(error)

    # ------------------------------------------------------------------
    # transport events
    # ------------------------------------------------------------------

    def on_message(self, raw: Frame) -> None:
        if self._state is ConnectionState.CLOSED:
            logger.debug("Dropping frame received after close: %.40r", raw)
            return
        while self._waiters:
            waiter = self._waiters.popleft()
            # A cancelled read must not swallow the frame
            if not waiter.done():
                waiter.set_result(raw)
                return
        self._frames.append(raw)

    def on_close(self, exc: Optional[BaseException] = None) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        if exc is not None:
            logger.warning("Chat socket errored: %s", exc)
        self._state = ConnectionState.CLOSED
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)

    # ------------------------------------------------------------------
    # consumer side
    # ------------------------------------------------------------------

    async def read_raw(self) -> Optional[Frame]:
        """Next frame in arrival order, or None once the socket has closed"""
        if self._frames:
            return self._frames.popleft()
        if self._state is ConnectionState.CLOSED:
            return None
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return await waiter

    async def read(self) -> Optional[Message]:
        """
        Read a chat message asynchronously. If the socket has closed this
        returns None, and keeps returning None for all subsequent reads.

        Raises ParseError if the frame is not UTF-8 text or its body is not
        valid JSON; the frame is consumed either way.
        """
        raw = await self.read_raw()
        if raw is None:
            return None
        return decode_frame(raw)

    async def send(self, code: Union[str, Enum], body: Optional[Any] = None) -> None:
        """Write a chat message to the socket. No acknowledgement is awaited."""
        if isinstance(code, Enum):
            code = code.value
        frame = encode_frame(code, body)
        try:
            await self.websocket.send(frame)
            logger.debug("Sent %s", code, extra={"msg_type": code})
        except websockets.exceptions.ConnectionClosed:
            logger.warning("Connection closed while sending %s", code)

    async def close(self) -> None:
        """Close the socket. Best-effort, never raises."""
        try:
            await self.websocket.close(code=1000)
        except Exception as e:
            logger.error("Error closing chat socket: %s", e)
        self.on_close()
        if self._reader is not None and not self._reader.done():
            self._reader.cancel()
            with suppress(asyncio.CancelledError):
                await self._reader
