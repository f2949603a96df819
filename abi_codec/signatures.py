"""Canonical function signature handling."""

from typing import List, Tuple

from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import normalize, parse

from .errors import AbiCodecError

_IGNORED_WORDS = {"memory", "calldata", "storage", "indexed", "payable"}


def parse_signature(signature: str) -> Tuple[str, Tuple[str, ...]]:
    """Split a signature into its function name and canonical argument types."""

    if not isinstance(signature, str):
        raise AbiCodecError("Signature must be a string.")
    text = signature.strip()
    open_index = text.find("(")
    if open_index <= 0 or not text.endswith(")"):
        raise AbiCodecError(f"Invalid function signature: {signature!r}")

    name = text[:open_index].strip()
    if name.startswith("function "):
        name = name[len("function "):].strip()
    if not name.isidentifier():
        raise AbiCodecError(f"Invalid function name in signature: {signature!r}")

    body = text[open_index + 1 : -1]
    types = tuple(_canonical_type(param) for param in _split_params(body))
    return name, types


def normalize_signature(signature: str) -> str:
    name, types = parse_signature(signature)
    return f"{name}({','.join(types)})"


def signatures_match(left: str, right: str) -> bool:
    """Compare two signatures after normalization; unparseable ones never match."""

    try:
        return normalize_signature(left) == normalize_signature(right)
    except AbiCodecError:
        return False


def _split_params(body: str) -> List[str]:
    if not body.strip():
        return []
    params = []
    depth = 0
    current = []
    for char in body:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise AbiCodecError("Unbalanced parentheses in signature.")
        if char == "," and depth == 0:
            params.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise AbiCodecError("Unbalanced parentheses in signature.")
    params.append("".join(current))
    return params


def _canonical_type(param: str) -> str:
    text = param.strip()
    if not text:
        raise AbiCodecError("Empty parameter in signature.")

    if text.startswith("tuple("):
        text = text[len("tuple"):]

    if text.startswith("("):
        close_index = _matching_paren(text)
        inner = ",".join(_canonical_type(p) for p in _split_params(text[1:close_index]))
        rest = text[close_index + 1 :]
        suffix = rest.split()[0] if rest and not rest[0].isspace() else ""
        candidate = f"({inner}){suffix}"
    else:
        words = [word for word in text.split() if word not in _IGNORED_WORDS]
        if not words:
            raise AbiCodecError(f"Missing type in parameter: {param!r}")
        candidate = normalize(words[0])

    try:
        abi_type = parse(candidate)
        abi_type.validate()
    except (ABITypeError, ParseError) as exc:
        raise AbiCodecError(f"Invalid parameter type: {param!r}") from exc
    return abi_type.to_type_str()


def _matching_paren(text: str) -> int:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    raise AbiCodecError("Unbalanced parentheses in signature.")
