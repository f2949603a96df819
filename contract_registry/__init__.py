from .models import ContractInfo, UnknownContractError
from .registry import MAINNET_CHAIN_ID, ContractRegistry, default_registry, load_registry

__all__ = [
    "ContractInfo",
    "ContractRegistry",
    "MAINNET_CHAIN_ID",
    "UnknownContractError",
    "default_registry",
    "load_registry",
]
