import pytest

from nft_oracle.core.keys import MalformedKeyError, decode_token_key, encode_token_key


def test_key_is_length_prefixed():
    assert encode_token_key("issuerX", "1") == "7:issuerX1"


def test_separator_in_components_does_not_collide():
    # naive "a:" + "b" vs "a" + ":b" concatenation would collide
    k1 = encode_token_key("a:", "b")
    k2 = encode_token_key("a", ":b")
    assert k1 != k2
    assert decode_token_key(k1) == ("a:", "b")
    assert decode_token_key(k2) == ("a", ":b")


def test_digits_in_issuer_do_not_confuse_decoder():
    key = encode_token_key("12:nft.near", "7:x")
    assert decode_token_key(key) == ("12:nft.near", "7:x")


@pytest.mark.parametrize("issuer,token", [("", "1"), ("nft.near", "")])
def test_empty_component_rejected(issuer, token):
    with pytest.raises(MalformedKeyError):
        encode_token_key(issuer, token)


def test_overlong_component_rejected():
    with pytest.raises(MalformedKeyError):
        encode_token_key("x" * 11, "1", max_len=10)


def test_malformed_error_is_value_error():
    assert issubclass(MalformedKeyError, ValueError)


@pytest.mark.parametrize("raw", ["nocolon", "x:abc", "0:abc", "3:abc", "9:abc"])
def test_decode_rejects_garbage(raw):
    with pytest.raises(MalformedKeyError):
        decode_token_key(raw)


def test_decode_rejects_non_ascii_digit_prefix():
    with pytest.raises(MalformedKeyError):
        decode_token_key("²:abc")


def test_identifier_limit_cannot_exceed_column_width():
    from pydantic import ValidationError

    from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH, Settings

    with pytest.raises(ValidationError):
        Settings(max_identifier_length=IDENTIFIER_MAX_LENGTH + 1)
    assert Settings(max_identifier_length=64).max_identifier_length == 64
