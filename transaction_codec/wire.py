"""Executor wire format: parallel targets/values/signatures/calldatas."""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .models import MAX_UINT256, MalformedInputError, RawTransaction

_HEX_PATTERN = re.compile(r"^0x([0-9a-fA-F]{2})*$")
_DECIMAL_PATTERN = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class WireTransactions:
    targets: Tuple[str, ...]
    values: Tuple[str, ...]
    signatures: Tuple[str, ...]
    calldatas: Tuple[str, ...]

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "targets": list(self.targets),
            "values": list(self.values),
            "signatures": list(self.signatures),
            "calldatas": list(self.calldatas),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Sequence[object]]) -> "WireTransactions":
        missing = [
            key
            for key in ("targets", "values", "signatures", "calldatas")
            if key not in data
        ]
        if missing:
            raise MalformedInputError(
                "Proposal is missing " + ", ".join(missing) + "."
            )
        return WireTransactions(
            targets=tuple(str(item) for item in data["targets"]),
            values=tuple(str(item) for item in data["values"]),
            signatures=tuple(str(item) for item in data["signatures"]),
            calldatas=tuple(str(item) for item in data["calldatas"]),
        )


def from_wire(
    targets: Sequence[str],
    values: Sequence[str],
    signatures: Sequence[str],
    calldatas: Sequence[str],
) -> Tuple[RawTransaction, ...]:
    lengths = {len(targets), len(values), len(signatures), len(calldatas)}
    if len(lengths) != 1:
        raise MalformedInputError(
            "targets, values, signatures and calldatas must have equal lengths."
        )

    transactions = []
    for index, (target, value, signature, calldata) in enumerate(
        zip(targets, values, signatures, calldatas)
    ):
        value_str = str(value).strip()
        if not _DECIMAL_PATTERN.match(value_str):
            raise MalformedInputError(
                f"Value at index {index} must be a non-negative integer string."
            )
        if len(value_str.lstrip("0")) > len(str(MAX_UINT256)) or int(value_str) > MAX_UINT256:
            raise MalformedInputError(f"Value at index {index} exceeds uint256.")
        if not _HEX_PATTERN.match(calldata):
            raise MalformedInputError(
                f"Calldata at index {index} must be 0x-prefixed hex."
            )
        transactions.append(
            RawTransaction(
                target=target,
                signature=signature,
                calldata=calldata,
                value=int(value_str),
            )
        )
    return tuple(transactions)


def from_wire_transactions(wire: WireTransactions) -> Tuple[RawTransaction, ...]:
    return from_wire(wire.targets, wire.values, wire.signatures, wire.calldatas)


def to_wire(transactions: Iterable[RawTransaction]) -> WireTransactions:
    transactions = tuple(transactions)
    return WireTransactions(
        targets=tuple(t.target for t in transactions),
        values=tuple(str(t.value) for t in transactions),
        signatures=tuple(t.signature for t in transactions),
        calldatas=tuple(t.calldata for t in transactions),
    )
