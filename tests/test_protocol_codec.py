"""Tests for the PING:<tag>:<text> message codec."""
import pytest

from plantlink.parsing.protocol import DecodedRequest, RequestTag, format_message, parse_message


def test_parse_tagged_message():
    request = parse_message("PING:3:yellow leaves, soft stems")
    assert request == DecodedRequest(tag=3, content="yellow leaves, soft stems")
    assert request.request_tag is RequestTag.DIAGNOSIS_REQUEST


def test_parse_trims_content():
    assert parse_message("PING:2:   now please  ").content == "now please"


def test_parse_untagged_defaults_to_name_request():
    request = parse_message("  Monstera deliciosa \n")
    assert request.tag == RequestTag.NAME_REQUEST
    assert request.content == "Monstera deliciosa"


@pytest.mark.parametrize(
    "raw",
    [
        "PING:12:two digit tag",
        "PING:x:letter tag",
        "PING:1:",
        "ping:1:lowercase",
        "prefix PING:1:Pothos",
        "PING:1:first line\nsecond line",
        "",
    ],
)
def test_default_tag_law(raw):
    assert parse_message(raw) == DecodedRequest(tag=1, content=raw.strip())


def test_unknown_digit_is_kept():
    request = parse_message("PING:9:hello")
    assert request.tag == 9
    assert request.content == "hello"
    assert request.request_tag is None


def test_parse_none_value():
    assert parse_message(None) == DecodedRequest(tag=1, content="")


def test_format_message():
    assert format_message(RequestTag.WATER_REQUEST, "Manual watering initiated.") == "PING:2:Manual watering initiated."
    assert format_message(9, "x") == "PING:9:x"


@pytest.mark.parametrize("tag", list(RequestTag))
@pytest.mark.parametrize("text", ["Pothos", "Ficus lyrata: fiddle leaf", "brown tips, 50% humidity"])
def test_round_trip(tag, text):
    decoded = parse_message(format_message(tag, text))
    assert decoded.tag == tag
    assert decoded.content == text


def test_multiline_reply_does_not_parse_as_tagged():
    # Replies can span lines; inbound requests are single line.
    reply = format_message(RequestTag.NAME_REQUEST, "Plant: Pothos\n- Ideal Soil Moisture Threshold: 60%")
    assert parse_message(reply).content == reply
