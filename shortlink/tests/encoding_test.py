import pytest

from shortlink.core.config import DEFAULT_ALPHABET
from shortlink.core.exceptions import InvalidCharacterError
from shortlink.utils.encoding import BaseNCodec, default_codec


def test_default_alphabet_excludes_delimiter():
    assert len(DEFAULT_ALPHABET) == 61
    assert "g" not in DEFAULT_ALPHABET
    assert default_codec.base == 61


def test_zero_encodes_to_first_symbol():
    """Zero must not encode to an empty string."""
    assert default_codec.encode(0) == "0"
    assert default_codec.decode("0") == 0


def test_known_values():
    assert default_codec.encode(1) == "1"
    assert default_codec.encode(60) == "Z"
    assert default_codec.encode(61) == "10"
    assert default_codec.encode(61 * 61) == "100"
    assert default_codec.decode("Z") == 60
    assert default_codec.decode("10") == 61


def test_round_trip_first_million_ids():
    codec = default_codec
    for n in range(1_000_000):
        assert codec.decode(codec.encode(n)) == n


@pytest.mark.parametrize("power", range(1, 11))
def test_round_trip_at_base_powers(power):
    codec = default_codec
    for n in (codec.base ** power - 1, codec.base ** power, codec.base ** power + 1):
        assert codec.decode(codec.encode(n)) == n


def test_round_trip_i64_max():
    n = 2**63 - 1
    assert default_codec.decode(default_codec.encode(n)) == n


def test_encoded_ids_only_use_alphabet():
    for n in range(0, 200_000, 7):
        assert default_codec.is_encoded(default_codec.encode(n))


def test_decode_rejects_unknown_character():
    with pytest.raises(InvalidCharacterError) as exc_info:
        default_codec.decode("ab-c")
    assert exc_info.value.char == "-"


def test_decode_rejects_delimiter():
    with pytest.raises(InvalidCharacterError):
        default_codec.decode("1g2")


def test_encode_rejects_negative():
    with pytest.raises(ValueError):
        default_codec.encode(-1)


def test_small_alphabet_is_plain_binary():
    codec = BaseNCodec("01")
    assert codec.encode(5) == "101"
    assert codec.decode("101") == 5
    for n in range(2048):
        assert codec.decode(codec.encode(n)) == n


@pytest.mark.parametrize("alphabet", ["", "a", "abca"])
def test_bad_alphabets_are_rejected(alphabet):
    with pytest.raises(ValueError):
        BaseNCodec(alphabet)
