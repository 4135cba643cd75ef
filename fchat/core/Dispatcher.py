from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Optional

from shared.frame import Message
from shared.log import get_logger, log_chat_message

if TYPE_CHECKING:
    from fchat.core.ChatSocket import ChatSocket

logger = get_logger(__name__)

# Type alias for handler functions
MessageHandler = Callable[["ChatSocket", Message], Awaitable[None]]


class HandlerErrorPolicy(str, Enum):
    """What the dispatch loop does when a handler raises."""
    ABORT = "abort"          # propagate, ending the session
    CONTINUE = "continue"    # log and move on to the next message


class Dispatcher:
    """
    Routes post-handshake messages to handlers by message code.

    Handlers run one at a time, in arrival order. Codes without a handler
    are discarded.
    """

    def __init__(
        self,
        chat_socket: "ChatSocket",
        handlers: Optional[Dict[str, MessageHandler]] = None,
        error_policy: HandlerErrorPolicy = HandlerErrorPolicy.ABORT,
    ) -> None:
        self.chat_socket = chat_socket
        self.handlers: Dict[str, MessageHandler] = dict(handlers or {})
        self.error_policy = HandlerErrorPolicy(error_policy)

    def on(self, code: str, handler: MessageHandler) -> None:
        self.handlers[code] = handler

    async def run(self) -> int:
        """Dispatch until the socket closes; returns how many messages were handled."""
        handled = 0
        while True:
            msg = await self.chat_socket.read()
            if msg is None:
                logger.info("No more incoming messages available.")
                return handled

            handler = self.handlers.get(msg.code)
            if handler is None:
                log_chat_message(logger, "debug", "Unhandled incoming message", message=msg)
                continue

            try:
                await handler(self.chat_socket, msg)
            except Exception:
                if self.error_policy is HandlerErrorPolicy.ABORT:
                    raise
                logger.exception("Handler for %s failed; continuing", msg.code, extra={"msg_type": msg.code})
            handled += 1
