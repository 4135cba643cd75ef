from __future__ import annotations

from enum import Enum


class MessageType(str, Enum):
    """F-Chat wire codes used by the bot."""

    # Identification
    IDN = "IDN"      # Identify (out) / identification confirmed (in)
    ERR = "ERR"      # Server error, fatal while identifying

    # Keepalive
    PIN = "PIN"      # Ping from the server, answered with the same code

    # Channels
    JCH = "JCH"      # Join request (out) / someone joined a channel (in)
    MSG = "MSG"      # Channel message

    # Private messages
    PRI = "PRI"      # Private message

