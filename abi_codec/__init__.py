from .codec import (
    DecodedCall,
    decode_arguments,
    decode_calldata_with_signature,
    encode_arguments,
    from_json_value,
    to_json_value,
)
from .errors import AbiCodecError
from .signatures import normalize_signature, parse_signature, signatures_match

__all__ = [
    "AbiCodecError",
    "DecodedCall",
    "decode_arguments",
    "decode_calldata_with_signature",
    "encode_arguments",
    "from_json_value",
    "normalize_signature",
    "parse_signature",
    "signatures_match",
    "to_json_value",
]
