"""Encode and decode governance call arguments.

Executor calldata carries only the ABI-encoded arguments; the function
selector is implied by the separate signature string.
"""

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import ABITypeError, DecodingError, EncodingError, ParseError
from eth_abi.grammar import ABIType, parse
from eth_utils import decode_hex, encode_hex, is_address, to_normalized_address

from .errors import AbiCodecError
from .signatures import parse_signature


@dataclass(frozen=True)
class DecodedCall:
    function_name: str
    inputs: Tuple[Any, ...]
    input_types: Tuple[str, ...]


def encode_arguments(types: Sequence[str], values: Sequence[Any]) -> str:
    types = tuple(types)
    values = tuple(values)
    if len(types) != len(values):
        raise AbiCodecError(
            f"Expected {len(types)} arguments, got {len(values)}."
        )
    prepared = tuple(_prepare(_parse_type(t), v) for t, v in zip(types, values))
    try:
        return encode_hex(encode(list(types), list(prepared)))
    except (EncodingError, TypeError, ValueError) as exc:
        raise AbiCodecError(f"Cannot encode arguments: {exc}") from exc


def decode_arguments(types: Sequence[str], calldata: str) -> Tuple[Any, ...]:
    """Decode calldata strictly: it must be the canonical encoding of the result."""

    types = tuple(types)
    abi_types = tuple(_parse_type(t) for t in types)
    data = _hex_to_bytes(calldata)
    try:
        values = decode(list(types), data)
    except (DecodingError, UnicodeDecodeError) as exc:
        raise AbiCodecError(f"Cannot decode calldata as ({','.join(types)}): {exc}") from exc

    normalized = tuple(_normalize(t, v) for t, v in zip(abi_types, values))
    if _hex_to_bytes(encode_arguments(types, normalized)) != data:
        raise AbiCodecError(
            f"Calldata is not a canonical encoding of ({','.join(types)})."
        )
    return normalized


def decode_calldata_with_signature(signature: str, calldata: str) -> DecodedCall:
    function_name, input_types = parse_signature(signature)
    inputs = decode_arguments(input_types, calldata)
    return DecodedCall(
        function_name=function_name,
        inputs=inputs,
        input_types=input_types,
    )


def to_json_value(type_str: str, value: Any) -> Any:
    return _to_json(_parse_type(type_str), value)


def from_json_value(type_str: str, value: Any) -> Any:
    try:
        return _from_json(_parse_type(type_str), value)
    except (TypeError, ValueError) as exc:
        raise AbiCodecError(f"Invalid {type_str} value: {value!r}") from exc


def _parse_type(type_str: str) -> ABIType:
    try:
        abi_type = parse(type_str)
        abi_type.validate()
    except (ABITypeError, ParseError) as exc:
        raise AbiCodecError(f"Invalid ABI type: {type_str!r}") from exc
    return abi_type


def _hex_to_bytes(calldata: str) -> bytes:
    if not isinstance(calldata, str) or not calldata.startswith("0x"):
        raise AbiCodecError("Calldata must be a 0x-prefixed hex string.")
    try:
        return decode_hex(calldata)
    except ValueError as exc:
        raise AbiCodecError("Calldata is not valid hex.") from exc


def _components(abi_type: ABIType, value: Any) -> Tuple[Tuple[ABIType, Any], ...]:
    if abi_type.is_array:
        return tuple((abi_type.item_type, item) for item in value)
    return tuple(zip(abi_type.components, value))


def _is_container(abi_type: ABIType) -> bool:
    return abi_type.is_array or hasattr(abi_type, "components")


def _normalize(abi_type: ABIType, value: Any) -> Any:
    if _is_container(abi_type):
        return tuple(_normalize(t, v) for t, v in _components(abi_type, value))
    if abi_type.base == "address":
        return to_normalized_address(value)
    return value


def _prepare(abi_type: ABIType, value: Any) -> Any:
    if _is_container(abi_type):
        if isinstance(value, (str, bytes)):
            raise AbiCodecError(f"Expected a sequence for {abi_type.to_type_str()}.")
        return tuple(_prepare(t, v) for t, v in _components(abi_type, value))
    if abi_type.base == "address":
        if not isinstance(value, str) or not is_address(value):
            raise AbiCodecError(f"Invalid address: {value!r}")
        return to_normalized_address(value)
    return value


def _to_json(abi_type: ABIType, value: Any) -> Any:
    if _is_container(abi_type):
        return [_to_json(t, v) for t, v in _components(abi_type, value)]
    if abi_type.base == "bytes":
        return encode_hex(value)
    return value


def _from_json(abi_type: ABIType, value: Any) -> Any:
    if _is_container(abi_type):
        return tuple(_from_json(t, v) for t, v in _components(abi_type, value))
    if abi_type.base == "address":
        return to_normalized_address(value)
    if abi_type.base == "bytes":
        return decode_hex(value)
    if abi_type.base in ("uint", "int"):
        return int(value)
    return value
