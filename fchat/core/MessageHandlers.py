from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from fchat.core.Dispatcher import MessageHandler
from fchat.core.MessageTypes import MessageType
from shared.frame import Message
from shared.log import get_logger, log_chat_message

if TYPE_CHECKING:
    from fchat.core.ChatSocket import ChatSocket

logger = get_logger(__name__)

GREETING_TRIGGER = "!hello"


def _character_name(value) -> str:
    # JCH carries {"identity": name}; MSG and PRI carry the bare name
    if isinstance(value, dict):
        return value.get("identity", "")
    return value or ""


class ChatMessageHandlers:
    """Demonstration handlers for the messages the bot subscribes to."""

    @staticmethod
    async def handle_ping(chat_socket: "ChatSocket", msg: Message) -> None:
        await chat_socket.send(MessageType.PIN.value)

    @staticmethod
    async def handle_channel_joined(chat_socket: "ChatSocket", msg: Message) -> None:
        channel = msg.get("channel")
        who = _character_name(msg.get("character"))
        logger.info('Joined channel "%s"', channel, extra={"channel": channel, "character": who})

    @staticmethod
    async def handle_private_message(chat_socket: "ChatSocket", msg: Message) -> None:
        """Echo the text back to whoever sent it."""
        log_chat_message(logger, "info", msg.to_frame(), message=msg)
        await chat_socket.send(MessageType.PRI.value, {
            "recipient": msg.body["character"],
            "message": msg.body["message"],
        })

    @staticmethod
    async def handle_channel_message(chat_socket: "ChatSocket", msg: Message) -> None:
        if msg.get("message") != GREETING_TRIGGER:
            return
        await chat_socket.send(MessageType.MSG.value, {
            "channel": msg.body["channel"],
            "message": f"Hello, {msg.body['character']}!",
        })

    @staticmethod
    async def handle_error(chat_socket: "ChatSocket", msg: Message) -> None:
        logger.warning(
            "Server error %s: %s",
            msg.get("number", msg.get("code")),
            msg.get("message"),
            extra={"msg_type": msg.code},
        )


# Handler registry mapping message codes to their handlers
DEFAULT_HANDLER_REGISTRY: Dict[str, MessageHandler] = {
    MessageType.PIN.value: ChatMessageHandlers.handle_ping,
    MessageType.JCH.value: ChatMessageHandlers.handle_channel_joined,
    MessageType.PRI.value: ChatMessageHandlers.handle_private_message,
    MessageType.MSG.value: ChatMessageHandlers.handle_channel_message,
    MessageType.ERR.value: ChatMessageHandlers.handle_error,
}
