"""
Normalization of loosely-typed operation inputs.

Contract parameters and bytecode reach the signer from third-party dApp
integrations with inconsistent encodings. Each is decoded by an ordered
chain of ``(predicate, decoder)`` pairs: the first decoder whose predicate
matches and which decodes without error wins, and raw UTF-8 is the final
fallback.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import string
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from ..runtime.errors import ParameterDecodeFailed
from .operations import DatastoreEntry

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]
Decoder = Callable[[str], bytes]
DecoderChain = Sequence[Tuple[str, Predicate, Decoder]]

_HEX_DIGITS = frozenset(string.hexdigits)

DEFAULT_CALL_MAX_GAS = 100_000_000
DEFAULT_EXECUTE_MAX_GAS = 500_000_000

# Largest decoded size accepted from a numeric-key object.
MAX_DECODED_SIZE = 10 * 1024 * 1024


def _byte_list(values: Any) -> bytes:
    if not isinstance(values, list):
        raise ValueError("expected a JSON array")
    out = bytearray()
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"non-integer array element: {v!r}")
        out.append(v & 0xFF)
    return bytes(out)


def decode_numeric_array(text: str) -> bytes:
    """Decode ``[1,2,3]`` to bytes, truncating each element to 8 bits."""
    return _byte_list(json.loads(text))


def decode_numeric_key_object(text: str) -> bytes:
    """
    Decode ``{"0": 65, "1": 66}`` to bytes indexed by key.

    Missing indices below the highest key are zero.
    """
    obj = json.loads(text)
    if not isinstance(obj, dict) or not obj:
        raise ValueError("expected a non-empty JSON object")
    if not all(k.isdigit() for k in obj):
        raise ValueError("object keys are not all numeric")
    size = max(int(k) for k in obj) + 1
    if size > MAX_DECODED_SIZE:
        raise ValueError("object index out of range")
    out = bytearray(size)
    for key, v in obj.items():
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"non-integer value at index {key}: {v!r}")
        out[int(key)] = v & 0xFF
    return bytes(out)


def decode_base64(text: str) -> bytes:
    """Decode Base64, padding optional."""
    compact = "".join(text.split())
    compact += "=" * (-len(compact) % 4)
    return base64.b64decode(compact, validate=True)


def decode_hex(text: str) -> bytes:
    """Decode hex two digits at a time; an odd trailing digit is a byte of its own."""
    return bytes(int(text[i:i + 2], 16) for i in range(0, len(text), 2))


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in _HEX_DIGITS for c in text)


def _always(text: str) -> bool:
    return True


PARAMETER_DECODERS: DecoderChain = (
    ("json-object", lambda t: t.startswith("{") and ":" in t, decode_numeric_key_object),
    ("json-array", lambda t: t.startswith("["), decode_numeric_array),
    ("base64", _always, decode_base64),
    ("hex", _is_hex, decode_hex),
)

BYTECODE_DECODERS: DecoderChain = (
    ("json-array", lambda t: t.startswith("[") and t.endswith("]"), decode_numeric_array),
    ("hex", _is_hex, decode_hex),
    ("base64", _always, decode_base64),
)


def decode_with_chain(text: str, chain: DecoderChain, what: str) -> bytes:
    """
    Run text through an ordered decoder chain.

    Returns:
        Output of the first matching decoder that succeeds, else UTF-8 bytes
    """
    for name, predicate, decoder in chain:
        if not predicate(text):
            continue
        try:
            decoded = decoder(text)
        except (ValueError, TypeError, binascii.Error):
            continue
        logger.debug("%s decoded as %s (%d bytes)", what, name, len(decoded))
        return decoded
    logger.debug("%s decoded as utf-8", what)
    return text.encode("utf-8")


def decode_parameter(parameter: Optional[Union[str, bytes]]) -> bytes:
    """
    Decode a contract call parameter.

    Tried in order: numeric-key JSON object, JSON numeric array, Base64,
    hex, raw UTF-8. ``None`` or an empty string is an empty parameter.
    """
    if parameter is None:
        return b""
    if isinstance(parameter, (bytes, bytearray)):
        return bytes(parameter)
    text = parameter.strip()
    if not text:
        return b""
    return decode_with_chain(text, PARAMETER_DECODERS, "parameter")


def decode_bytecode(bytecode: Union[str, bytes]) -> bytes:
    """
    Decode smart contract bytecode.

    Tried in order: JSON numeric array, hex, Base64, raw UTF-8.

    Raises:
        ParameterDecodeFailed: If bytecode is empty
    """
    if isinstance(bytecode, (bytes, bytearray)):
        data = bytes(bytecode)
    else:
        text = bytecode.strip()
        data = decode_with_chain(text, BYTECODE_DECODERS, "bytecode") if text else b""
    if not data:
        raise ParameterDecodeFailed("Bytecode is empty")
    return data


def _datastore_side(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        return _byte_list(value)
    if value is None:
        return b""
    text = str(value)
    if text.startswith("["):
        return decode_numeric_array(text)
    return text.encode("utf-8")


def decode_datastore(datastore: Optional[Union[str, Sequence[Any]]]) -> List[DatastoreEntry]:
    """
    Decode a datastore given as JSON text or as a list of entries.

    Each entry is ``{"key": ..., "value": ...}`` or a ``(key, value)`` pair;
    each side is a numeric-array string, a list of ints, bytes, or text
    encoded as UTF-8.

    Raises:
        ParameterDecodeFailed: If the datastore is not a list of entries
    """
    if datastore is None:
        return []
    if isinstance(datastore, str):
        text = datastore.strip()
        if text in ("", "null", "[]"):
            return []
        try:
            datastore = json.loads(text)
        except ValueError as e:
            raise ParameterDecodeFailed("Datastore is not valid JSON", cause=e)
    if not isinstance(datastore, list):
        raise ParameterDecodeFailed("Datastore must be a list of entries")

    entries: List[DatastoreEntry] = []
    for index, entry in enumerate(datastore):
        try:
            if isinstance(entry, dict):
                key, value = entry.get("key", ""), entry.get("value", "")
            else:
                key, value = entry
            entries.append((_datastore_side(key), _datastore_side(value)))
        except (ValueError, TypeError) as e:
            raise ParameterDecodeFailed(
                "Malformed datastore entry",
                details={"index": index},
                cause=e,
            )
    return entries


def parse_max_gas(max_gas: Optional[Union[str, int]], default: int) -> int:
    """
    Parse a max-gas value, using default when none is given.

    Raises:
        ParameterDecodeFailed: If max_gas is not a non-negative integer
    """
    if max_gas is None or (isinstance(max_gas, str) and not max_gas.strip()):
        return default
    if isinstance(max_gas, (bool, float)):
        raise ParameterDecodeFailed(f"Invalid max gas: {max_gas!r}")
    try:
        value = int(max_gas)
    except (TypeError, ValueError) as e:
        raise ParameterDecodeFailed(f"Invalid max gas: {max_gas!r}", cause=e)
    if value < 0:
        raise ParameterDecodeFailed("Max gas cannot be negative", details={"maxGas": value})
    return value


__all__ = [
    "DEFAULT_CALL_MAX_GAS",
    "DEFAULT_EXECUTE_MAX_GAS",
    "PARAMETER_DECODERS",
    "BYTECODE_DECODERS",
    "decode_with_chain",
    "decode_numeric_array",
    "decode_numeric_key_object",
    "decode_parameter",
    "decode_bytecode",
    "decode_datastore",
    "parse_max_gas",
]
