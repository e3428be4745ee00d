import json

import pytest

from bencodex import InvalidFormat, InvalidUtf8, Unsupported, equal
from bencodex.jsonrepr import dumps, from_json_value, loads, to_json_value


def test_scalars():
    assert to_json_value(None) is None
    assert to_json_value(True) is True
    assert to_json_value(-12) == "-12"
    assert to_json_value(b"\x00\xff") == "0x00ff"
    assert to_json_value("hi") == "\ufeffhi"


def test_dictionary_keys_and_order():
    v = {"c": 3, b"b": [None], b"a": 1}
    assert dumps(v) == '{"0x61": "1", "0x62": [null], "\ufeffc": "3"}'


def test_loads_reads_every_form():
    text = '{"0x61": "1", "\\ufeffk": ["b64:aGk=", "0x", "\\ufeff", 7, null, false, "-9"]}'
    assert equal(loads(text), {b"a": 1, "k": [b"hi", b"", "", 7, None, False, -9]})


def test_huge_integer_string():
    n = 10 ** 5000 + 3
    assert from_json_value(to_json_value(n)) == n


@pytest.mark.parametrize("text", [
    '"hello"',          # neither text, binary nor integer
    '"0xzz"',
    '"b64:!!"',
    '"007"',
    '"-0"',
    '{"5": null}',      # integer as key
    '[1,',
])
def test_malformed_representations(text):
    with pytest.raises(InvalidFormat):
        loads(text)


@pytest.mark.parametrize("text", [
    '{"0x61": "1", "b64:YQ==": "2"}',
    '{"0x6a": null, "0x6A": null}',
    '{"\\ufeffa": "1", "\\ufeffa": "2"}',
])
def test_keys_spelling_the_same_key_rejected(text):
    with pytest.raises(InvalidFormat, match="repeats"):
        loads(text)


def test_binary_and_text_keys_do_not_collide():
    assert loads('{"0x61": "1", "\\ufeffa": "2"}') == {b"a": 1, "a": 2}


def test_floats_unsupported():
    with pytest.raises(Unsupported):
        loads("1.5")


def test_surrogate_text_rejected():
    with pytest.raises(InvalidUtf8):
        dumps("\ud800")


def test_round_trip_through_json_module():
    v = [{b"\x01": "x", "y": [b"z", 1 << 80]}, True]
    assert equal(from_json_value(json.loads(json.dumps(to_json_value(v)))), v)
