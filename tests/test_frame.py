import dataclasses
import json

import pytest

from shared.frame import Message, ParseError, decode_frame, encode_frame


def test_decode_code_only_frame():
    msg = decode_frame("PIN")

    assert msg == Message(code="PIN")
    assert msg.body is None


def test_decode_frame_with_body():
    assert decode_frame('IDN {"a":1}') == Message(code="IDN", body={"a": 1})


def test_body_is_everything_after_the_first_space():
    msg = decode_frame('MSG {"channel": "Development", "message": "hello there friend"}')

    assert msg.code == "MSG"
    assert msg.body == {"channel": "Development", "message": "hello there friend"}


def test_encode_without_body_is_code_alone():
    assert encode_frame("PIN") == "PIN"
    assert encode_frame("PIN", None) == "PIN"


def test_encode_uses_compact_json():
    assert encode_frame("JCH", {"channel": "Development"}) == 'JCH {"channel":"Development"}'


@pytest.mark.parametrize(
    "body",
    [
        {"channel": "Development"},
        {"nested": {"list": [1, 2.5, None, True], "text": "café ☃"}},
        [1, "two", {"three": 3}],
        "plain string",
        0,
        False,
    ],
)
def test_encode_then_decode_preserves_code_and_body(body):
    msg = decode_frame(encode_frame("PRI", body))

    assert msg.code == "PRI"
    assert msg.body == body


def test_invalid_json_body_raises_parse_error():
    with pytest.raises(ParseError) as exc_info:
        decode_frame("MSG {not json")

    assert exc_info.value.frame == "MSG {not json"
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


def test_binary_frame_is_decoded_as_utf8():
    msg = decode_frame('PRI {"message":"café"}'.encode("utf-8"))

    assert msg == Message("PRI", {"message": "café"})


def test_binary_frame_that_is_not_utf8_raises_parse_error():
    with pytest.raises(ParseError) as exc_info:
        decode_frame(b"MSG \xff\xfe")

    assert exc_info.value.frame == b"MSG \xff\xfe"
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_trailing_space_with_empty_body_is_a_parse_error():
    with pytest.raises(ParseError):
        decode_frame("IDN ")


def test_message_is_immutable():
    msg = Message(code="PIN")

    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.code = "IDN"


def test_message_get_tolerates_missing_body():
    assert Message(code="PIN").get("channel") is None
    assert Message(code="MSG", body=["x"]).get("channel", "fallback") == "fallback"
    assert Message(code="MSG", body={"channel": "A"}).get("channel") == "A"


def test_to_frame_reencodes():
    assert Message(code="JCH", body={"channel": "A"}).to_frame() == 'JCH {"channel":"A"}'
