from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Union
import json


class ParseError(Exception):
    """Raised when a received frame is not UTF-8 text or its body is not valid JSON."""

    def __init__(self, frame: Union[str, bytes], detail: str) -> None:
        super().__init__(f"Invalid frame ({detail}): {frame[:120]!r}")
        self.frame = frame


@dataclass(frozen=True)
class Message:
    """
    Decoded chat frame:

        <CODE>               e.g. "PIN"
        <CODE> <json-body>   e.g. 'JCH {"channel":"Development"}'

    Codes are fixed three letter uppercase tokens and are never escaped.
    A body of None means the frame carried no body at all.
    """
    code: str
    body: Optional[Any] = None

    @classmethod
    def from_frame(cls, frame: Union[str, bytes]) -> 'Message':
        """Parse wire text (or a binary frame holding UTF-8 text) into a Message"""
        if isinstance(frame, bytes):
            try:
                frame = frame.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(frame, str(e)) from e
        code, sep, body_str = frame.partition(" ")
        if not sep:
            return cls(code=frame)
        try:
            body = json.loads(body_str)
        except json.JSONDecodeError as e:
            raise ParseError(frame, str(e)) from e
        return cls(code=code, body=body)

    def to_frame(self) -> str:
        """Convert Message back to wire text"""
        return encode_frame(self.code, self.body)

    def get(self, key: str, default: Any = None) -> Any:
        """Body field lookup that tolerates missing or non-object bodies"""
        if isinstance(self.body, dict):
            return self.body.get(key, default)
        return default


def encode_frame(code: str, body: Optional[Any] = None) -> str:
    if body is None:
        return code
    return f"{code} {json.dumps(body, separators=(',', ':'))}"


def decode_frame(frame: Union[str, bytes]) -> Message:
    return Message.from_frame(frame)
