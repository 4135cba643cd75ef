from __future__ import annotations
from typing import Any, Iterable, Optional

from fchat.core.ChatSocket import ChatSocket
from fchat.core.MessageTypes import MessageType
from shared.log import get_logger

logger = get_logger(__name__)


class HandshakeFailure(Exception):
    """
    Identification did not complete.

    reason is "disconnected" when the socket closed before the server
    confirmed us, or "rejected" when the server answered with ERR; in the
    latter case code and message carry what the server sent.
    """

    DISCONNECTED = "disconnected"
    REJECTED = "rejected"

    def __init__(self, reason: str, code: Optional[Any] = None, message: Optional[str] = None) -> None:
        if reason == self.REJECTED:
            text = f"Identification failed with error {code}: {message}"
        else:
            text = "Chat disconnected during identification."
        super().__init__(text)
        self.reason = reason
        self.code = code
        self.message = message


async def identify(
    chat_socket: ChatSocket,
    account: str,
    ticket: str,
    character: str,
    client_name: str,
    client_version: str,
) -> None:
    """Send IDN and wait until the server confirms or refuses it."""
    logger.info("Identifying ourselves to F-Chat as %s...", character, extra={"character": character})

    await chat_socket.send(MessageType.IDN.value, {
        "method": "ticket",
        "account": account,
        "ticket": ticket,
        "character": character,
        "cname": client_name,
        "cversion": client_version,
    })

    while True:
        msg = await chat_socket.read()
        if msg is None:
            raise HandshakeFailure(HandshakeFailure.DISCONNECTED)
        if msg.code == MessageType.ERR.value:
            # The live server names the field "number"
            code = msg.get("code", msg.get("number"))
            raise HandshakeFailure(HandshakeFailure.REJECTED, code=code, message=msg.get("message"))
        if msg.code == MessageType.IDN.value:
            logger.info("Identified to F-Chat.")
            return
        if msg.code == MessageType.PIN.value:
            await chat_socket.send(MessageType.PIN.value)
            continue
        logger.debug("Ignoring %s before identification", msg.code)


async def join_channels(chat_socket: ChatSocket, channels: Iterable[str]) -> None:
    # Confirmations arrive later as ordinary JCH messages
    for channel in channels:
        logger.info("Joining channel %s...", channel, extra={"channel": channel})
        await chat_socket.send(MessageType.JCH.value, {"channel": channel})
