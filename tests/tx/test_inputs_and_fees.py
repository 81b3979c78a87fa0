"""
Input normalization (parameters, bytecode, datastore, max gas) and fee
estimation tests.
"""

import base64

import pytest

from massa_signer.runtime.errors import ParameterDecodeFailed
from massa_signer.tx import (
    DEFAULT_CALL_MAX_GAS,
    FeeParams,
    decode_bytecode,
    decode_datastore,
    decode_parameter,
    estimate_fee,
    parse_max_gas,
)


@pytest.mark.unit
class TestDecodeParameter:
    """Priority: numeric-key object, numeric array, Base64, hex, UTF-8."""

    def test_numeric_key_object(self):
        assert decode_parameter('{"0":65,"1":66}') == b"AB"

    def test_numeric_key_object_unordered_and_sparse(self):
        assert decode_parameter('{"2": 67, "0": 65}') == b"A\x00C"

    def test_numeric_array(self):
        assert decode_parameter("[65,66]") == b"AB"

    def test_array_elements_truncated_to_bytes(self):
        assert decode_parameter("[256, 321, -1]") == b"\x00\x41\xff"

    def test_base64(self):
        assert decode_parameter("QQ==") == b"A"

    def test_base64_wins_over_hex(self):
        """Test that an even-length hex string that is also valid Base64 decodes as Base64."""
        assert decode_parameter("abcd") == b"\x69\xb7\x1d"

    def test_unpadded_base64(self):
        """Test that Base64 without trailing padding still decodes as Base64."""
        assert decode_parameter("abcdef") == base64.b64decode("abcdef==")
        assert decode_parameter("QQ") == b"A"

    def test_hex_when_not_base64(self):
        """Test that hex is used when the text cannot be Base64 even with padding."""
        assert decode_parameter("0a1b2") == b"\x0a\x1b\x02"

    def test_utf8_fallback(self):
        assert decode_parameter("hello world!") == b"hello world!"

    def test_non_numeric_object_falls_back_to_utf8(self):
        text = '{"name": "x"}'
        assert decode_parameter(text) == text.encode("utf-8")

    def test_array_with_strings_falls_back_to_utf8(self):
        assert decode_parameter('["a"]') == b'["a"]'

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        assert decode_parameter(value) == b""

    def test_bytes_pass_through(self):
        assert decode_parameter(b"\x00\x01") == b"\x00\x01"


@pytest.mark.unit
class TestDecodeBytecode:
    """Priority: numeric array, hex, Base64, UTF-8."""

    def test_numeric_array(self):
        assert decode_bytecode("[0, 97, 115, 109]") == b"\x00asm"

    def test_hex_wins_over_base64(self):
        assert decode_bytecode("0061736d") == b"\x00asm"

    def test_base64(self):
        assert decode_bytecode("AGFzbQ==") == b"\x00asm"

    def test_utf8_fallback(self):
        assert decode_bytecode("not bytecode!") == b"not bytecode!"

    def test_odd_length_hex(self):
        """Test that an odd trailing hex digit becomes its own byte."""
        assert decode_bytecode("abc") == b"\xab\x0c"

    def test_unterminated_array_is_not_json(self):
        assert decode_bytecode("[1,2") == b"[1,2"

    def test_bytes_pass_through(self):
        assert decode_bytecode(b"\x00asm") == b"\x00asm"

    @pytest.mark.parametrize("value", ["", "  ", b""])
    def test_empty_rejected(self, value):
        with pytest.raises(ParameterDecodeFailed):
            decode_bytecode(value)


@pytest.mark.unit
class TestDecodeDatastore:
    """Datastore entries from JSON text or Python lists."""

    @pytest.mark.parametrize("value", [None, "", "null", "[]", []])
    def test_empty(self, value):
        assert decode_datastore(value) == []

    def test_json_objects_with_numeric_arrays(self):
        text = '[{"key": [1, 2], "value": [3]}, {"key": "name", "value": "massa"}]'
        assert decode_datastore(text) == [(b"\x01\x02", b"\x03"), (b"name", b"massa")]

    def test_pairs_and_bytes(self):
        entries = decode_datastore([(b"k", b"v"), ["a", None]])
        assert entries == [(b"k", b"v"), (b"a", b"")]

    def test_bracketed_string_side(self):
        assert decode_datastore([{"key": "[65]", "value": "x"}]) == [(b"A", b"x")]

    def test_invalid_json(self):
        with pytest.raises(ParameterDecodeFailed):
            decode_datastore("[{")

    def test_not_a_list(self):
        with pytest.raises(ParameterDecodeFailed):
            decode_datastore('{"key": "a"}')

    def test_malformed_entry(self):
        with pytest.raises(ParameterDecodeFailed) as exc_info:
            decode_datastore([{"key": "a"}, ("only-one",)])
        assert exc_info.value.details["index"] == 1


@pytest.mark.unit
class TestParseMaxGas:

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_default(self, value):
        assert parse_max_gas(value, DEFAULT_CALL_MAX_GAS) == 100_000_000

    def test_string_and_int(self):
        assert parse_max_gas("2500000", 1) == 2_500_000
        assert parse_max_gas(42, 1) == 42

    @pytest.mark.parametrize("value", ["lots", "-5", -5, 1.5, True])
    def test_invalid(self, value):
        with pytest.raises(ParameterDecodeFailed):
            parse_max_gas(value, 1)


@pytest.mark.unit
class TestEstimateFee:
    """Base fee of 0.01 plus 0.001% of the amount."""

    def test_zero_amount(self):
        assert estimate_fee("0") == 10_000_000

    def test_proportional_part(self):
        # 1000 units = 10**12 minor; 10**12 / 10**5 = 10**7
        assert estimate_fee("1000") == 20_000_000

    def test_minor_unit_input(self):
        assert estimate_fee(1_500_000_000) == 10_015_000

    def test_custom_params(self):
        assert estimate_fee(1000, FeeParams(base_fee=1, amount_divisor=10)) == 101
