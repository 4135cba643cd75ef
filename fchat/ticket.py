from __future__ import annotations
from http import HTTPStatus
from typing import Optional

import httpx

from shared.log import get_logger

logger = get_logger(__name__)

TICKET_URL = "https://www.f-list.net/json/getApiTicket.php"


class TicketError(Exception):
    """Raised when the login endpoint does not hand out an API ticket."""
    pass


async def get_api_ticket(
    account: str,
    password: str,
    *,
    url: str = TICKET_URL,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Log in over HTTP and return the API ticket used by IDN.

    The endpoint answers {"ticket": ...} on success and {"error": "..."}
    on failure, both with status 200.
    """
    logger.info("Getting API ticket for %s...", account)
    form = {"account": account, "password": password}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as owned:
                response = await owned.post(url, data=form)
        else:
            response = await client.post(url, data=form)
    except httpx.HTTPError as e:
        raise TicketError(f"Unable to call getApiTicket.php: {e}") from e

    if response.status_code != HTTPStatus.OK:
        raise TicketError(f"Unable to call getApiTicket.php; HTTP status code {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Failed to parse JSON: %.200s", response.text)
        raise TicketError("Unable to call getApiTicket.php; response is not JSON") from e

    if not isinstance(data, dict):
        raise TicketError("Unable to call getApiTicket.php; returned null response")
    if data.get("error"):
        raise TicketError(f"Unable to call getApiTicket.php; login error: {data['error']}")

    ticket = data.get("ticket")
    if not ticket:
        raise TicketError("Unable to call getApiTicket.php; no ticket in response")

    logger.info("Got API ticket.")
    return ticket
