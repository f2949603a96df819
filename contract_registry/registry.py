"""Chain-scoped lookup of well-known governance contracts."""

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from eth_utils import is_address, to_normalized_address

from .models import ContractInfo, UnknownContractError

MAINNET_CHAIN_ID = 1

_DEFAULT_ABIS: Dict[str, Tuple[str, ...]] = {
    "executor": (),
    "payer": ("sendOrRegisterDebt(address,uint256)",),
    "token-buyer": (),
    "stream-factory": (
        "createStream(address,uint256,address,uint256,uint256,uint8,address)",
    ),
    "token": ("safeTransferFrom(address,address,uint256)",),
    "weth-token": (
        "deposit()",
        "transfer(address,uint256)",
        "approve(address,uint256)",
    ),
    "usdc-token": (
        "transfer(address,uint256)",
        "approve(address,uint256)",
    ),
}

_DEFAULT_ADDRESSES: Dict[int, Dict[str, str]] = {
    MAINNET_CHAIN_ID: {
        "executor": "0xb1a32fc9f9d8b2cf86c068cae13108809547ef71",
        "payer": "0xd97bcd9f47cee35c0a9ec1dc40c1269afc9e8e1d",
        "token-buyer": "0x4f2acdc74f6941390d9b1804fabc3e780388cfe5",
        "stream-factory": "0x0fd206fc7a7dbcd5661157edcb1ffdd0d02a61ff",
        "token": "0x9c8ff314c9bc7f6e59a9d9225fb22946427edc03",
        "weth-token": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
        "usdc-token": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
    },
}


class ContractRegistry:
    """Read-only registry keyed by chain id and well-known contract name."""

    def __init__(self, contracts: Mapping[int, Iterable[ContractInfo]]) -> None:
        by_name: Dict[int, Dict[str, ContractInfo]] = {}
        by_address: Dict[int, Dict[str, ContractInfo]] = {}
        for chain_id, entries in contracts.items():
            names = by_name.setdefault(int(chain_id), {})
            addresses = by_address.setdefault(int(chain_id), {})
            for entry in entries:
                info = _normalized(entry)
                names[info.name] = info
                addresses[info.address] = info
        self._by_name = by_name
        self._by_address = by_address

    def chain_ids(self) -> Tuple[int, ...]:
        return tuple(sorted(self._by_name))

    def contracts(self, chain_id: int) -> Tuple[ContractInfo, ...]:
        entries = self._by_name.get(chain_id, {})
        return tuple(entries[name] for name in sorted(entries))

    def lookup(self, chain_id: int, name: str) -> Optional[ContractInfo]:
        return self._by_name.get(chain_id, {}).get(name)

    def resolve_identifier(self, chain_id: int, name: str) -> ContractInfo:
        info = self.lookup(chain_id, name)
        if info is None:
            raise UnknownContractError(
                f"No {name!r} contract registered for chain {chain_id}."
            )
        return info

    def identify(self, chain_id: int, address: str) -> Optional[ContractInfo]:
        if not isinstance(address, str) or not is_address(address):
            return None
        return self._by_address.get(chain_id, {}).get(to_normalized_address(address))


def default_registry() -> ContractRegistry:
    return ContractRegistry(_default_entries())


def load_registry(path: Optional[Path] = None) -> ContractRegistry:
    """Build the registry from the built-in table plus an optional JSON file."""

    entries = {
        chain_id: {info.name: info for info in infos}
        for chain_id, infos in _default_entries().items()
    }
    if path is not None:
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise UnknownContractError("Contracts file must map chain ids to contracts.")
        for chain_key, contracts in data.items():
            chain_entries = entries.setdefault(int(chain_key), {})
            for name, spec in contracts.items():
                chain_entries[name] = _entry_from_dict(name, spec)
    return ContractRegistry(
        {chain_id: tuple(infos.values()) for chain_id, infos in entries.items()}
    )


def _default_entries() -> Dict[int, Tuple[ContractInfo, ...]]:
    return {
        chain_id: tuple(
            ContractInfo(name=name, address=address, abi=_DEFAULT_ABIS.get(name, ()))
            for name, address in addresses.items()
        )
        for chain_id, addresses in _DEFAULT_ADDRESSES.items()
    }


def _entry_from_dict(name: str, spec: Mapping[str, object]) -> ContractInfo:
    if "address" not in spec:
        raise UnknownContractError(f"Contract {name!r} is missing an address.")
    abi = spec.get("abi")
    return ContractInfo(
        name=name,
        address=str(spec["address"]),
        abi=tuple(abi) if abi is not None else _DEFAULT_ABIS.get(name, ()),
    )


def _normalized(info: ContractInfo) -> ContractInfo:
    if not is_address(info.address):
        raise UnknownContractError(
            f"Contract {info.name!r} has an invalid address: {info.address!r}"
        )
    return ContractInfo(
        name=info.name,
        address=to_normalized_address(info.address),
        abi=tuple(info.abi),
    )
