"""Contract registry models."""

from dataclasses import dataclass
from typing import Dict, Tuple

from abi_codec import AbiCodecError, parse_signature


class UnknownContractError(ValueError):
    """Raised when a chain-scoped contract or function is not registered."""


@dataclass(frozen=True)
class ContractInfo:
    """A well-known contract on one chain, with a human-readable ABI."""

    name: str
    address: str
    abi: Tuple[str, ...] = ()

    def function_signature(self, function_name: str) -> str:
        for signature in self.abi:
            try:
                name, types = parse_signature(signature)
            except AbiCodecError as exc:
                raise UnknownContractError(
                    f"Contract {self.name} has an invalid ABI entry: {signature!r}"
                ) from exc
            if name == function_name:
                return f"{name}({','.join(types)})"
        raise UnknownContractError(
            f"Contract {self.name} has no function {function_name!r}."
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "address": self.address,
            "abi": list(self.abi),
        }
