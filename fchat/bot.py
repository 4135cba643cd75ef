from __future__ import annotations
from typing import Dict, Optional

from fchat.config import BotConfig
from fchat.core.ChatSocket import ChatSocket
from fchat.core.Dispatcher import Dispatcher, MessageHandler
from fchat.core.MessageHandlers import DEFAULT_HANDLER_REGISTRY
from fchat.session import identify, join_channels
from fchat.ticket import get_api_ticket
from shared.log import get_logger

logger = get_logger(__name__)


async def run_session(config: BotConfig, ticket: str,
                      handlers: Optional[Dict[str, MessageHandler]] = None) -> None:
    """Connect, identify, join and dispatch until the server hangs up."""
    chat_socket = await ChatSocket.open(config.chat_url)
    try:
        await identify(
            chat_socket,
            account=config.account,
            ticket=ticket,
            character=config.character,
            client_name=config.client_name,
            client_version=config.client_version,
        )
        await join_channels(chat_socket, config.channels)

        dispatcher = Dispatcher(
            chat_socket,
            DEFAULT_HANDLER_REGISTRY if handlers is None else handlers,
            error_policy=config.error_policy,
        )
        await dispatcher.run()
        logger.info("Chat connection closed.")
    finally:
        await chat_socket.close()


async def run_bot(config: BotConfig, handlers: Optional[Dict[str, MessageHandler]] = None) -> int:
    """
    Run one bot session and return the process exit status:
    0 when the server ended the session, 1 on any failure.
    """
    try:
        ticket = await get_api_ticket(config.account, config.password, url=config.ticket_url)
        await run_session(config, ticket, handlers)
        return 0
    except Exception as e:
        error_message = str(e) or repr(e)
        logger.error("===============")
        logger.error("UNHANDLED ERROR")
        logger.error("- - - - - - - -")
        logger.error(error_message)
        logger.error("===============")
        logger.debug("Session failure detail", exc_info=True)
        return 1
