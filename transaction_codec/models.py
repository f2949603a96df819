"""Raw and readable governance transaction models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union


class MalformedInputError(ValueError):
    """Raised when a transaction matches a known pattern but cannot be decoded."""


class Currency(Enum):
    ETH = "eth"
    WETH = "weth"
    USDC = "usdc"


DECIMALS_BY_CURRENCY: Dict[Currency, int] = {
    Currency.ETH: 18,
    Currency.WETH: 18,
    Currency.USDC: 6,
}

MAX_UINT256 = 2**256 - 1


class TransactionType(Enum):
    PAYER_TOP_UP = "payer-top-up"
    TRANSFER = "transfer"
    USDC_TRANSFER_VIA_PAYER = "usdc-transfer-via-payer"
    USDC_APPROVAL = "usdc-approval"
    WETH_DEPOSIT = "weth-deposit"
    WETH_TRANSFER = "weth-transfer"
    WETH_APPROVAL = "weth-approval"
    STREAM = "stream"
    TREASURY_NOUN_TRANSFER = "treasury-noun-transfer"
    UNPARSED_PAYABLE_FUNCTION_CALL = "unparsed-payable-function-call"
    UNPARSED_FUNCTION_CALL = "unparsed-function-call"
    PAYABLE_FUNCTION_CALL = "payable-function-call"
    FUNCTION_CALL = "function-call"


@dataclass(frozen=True)
class RawTransaction:
    """One index across the executor's targets/values/signatures/calldatas."""

    target: str
    signature: str
    calldata: str
    value: int = 0

    @property
    def is_native_transfer(self) -> bool:
        return self.signature == "" and self.calldata == "0x"


@dataclass(frozen=True)
class TransferTransaction:
    type: ClassVar[TransactionType] = TransactionType.TRANSFER

    target: str
    value: int


@dataclass(frozen=True)
class PayerTopUpTransaction:
    type: ClassVar[TransactionType] = TransactionType.PAYER_TOP_UP

    value: int


@dataclass(frozen=True)
class UsdcTransferViaPayerTransaction:
    type: ClassVar[TransactionType] = TransactionType.USDC_TRANSFER_VIA_PAYER

    receiver_address: str
    usdc_amount: int


@dataclass(frozen=True)
class UsdcApprovalTransaction:
    type: ClassVar[TransactionType] = TransactionType.USDC_APPROVAL

    spender_address: str
    usdc_amount: int


@dataclass(frozen=True)
class WethDepositTransaction:
    type: ClassVar[TransactionType] = TransactionType.WETH_DEPOSIT

    value: int


@dataclass(frozen=True)
class WethTransferTransaction:
    type: ClassVar[TransactionType] = TransactionType.WETH_TRANSFER

    receiver_address: str
    weth_amount: int


@dataclass(frozen=True)
class WethApprovalTransaction:
    type: ClassVar[TransactionType] = TransactionType.WETH_APPROVAL

    spender_address: str
    weth_amount: int


@dataclass(frozen=True)
class StreamTransaction:
    """Creation of a token stream through the stream factory.

    ``start_timestamp`` and ``end_timestamp`` are unix seconds. The stream
    contract address is predicted ahead of creation so that a later
    transaction can fund it.
    """

    type: ClassVar[TransactionType] = TransactionType.STREAM

    receiver_address: str
    token: Currency
    token_amount: int
    start_timestamp: int
    end_timestamp: int
    stream_contract_address: str
    nonce: int = 0


@dataclass(frozen=True)
class TreasuryNounTransferTransaction:
    type: ClassVar[TransactionType] = TransactionType.TREASURY_NOUN_TRANSFER

    receiver_address: str
    noun_id: int


@dataclass(frozen=True)
class FunctionCallTransaction:
    type: ClassVar[TransactionType] = TransactionType.FUNCTION_CALL

    target: str
    function_name: str
    function_inputs: Tuple[Any, ...]
    function_input_types: Tuple[str, ...]


@dataclass(frozen=True)
class PayableFunctionCallTransaction:
    type: ClassVar[TransactionType] = TransactionType.PAYABLE_FUNCTION_CALL

    target: str
    function_name: str
    function_inputs: Tuple[Any, ...]
    function_input_types: Tuple[str, ...]
    value: int


@dataclass(frozen=True)
class UnparsedFunctionCallTransaction:
    """A call whose calldata carries its own selector and no signature is given."""

    type: ClassVar[TransactionType] = TransactionType.UNPARSED_FUNCTION_CALL

    target: str
    calldata: str


@dataclass(frozen=True)
class UnparsedPayableFunctionCallTransaction:
    type: ClassVar[TransactionType] = TransactionType.UNPARSED_PAYABLE_FUNCTION_CALL

    target: str
    calldata: str
    value: int


ReadableTransaction = Union[
    TransferTransaction,
    PayerTopUpTransaction,
    UsdcTransferViaPayerTransaction,
    UsdcApprovalTransaction,
    WethDepositTransaction,
    WethTransferTransaction,
    WethApprovalTransaction,
    StreamTransaction,
    TreasuryNounTransferTransaction,
    FunctionCallTransaction,
    PayableFunctionCallTransaction,
    UnparsedFunctionCallTransaction,
    UnparsedPayableFunctionCallTransaction,
]

TRANSACTION_CLASSES: Dict[TransactionType, type] = {
    cls.type: cls
    for cls in (
        TransferTransaction,
        PayerTopUpTransaction,
        UsdcTransferViaPayerTransaction,
        UsdcApprovalTransaction,
        WethDepositTransaction,
        WethTransferTransaction,
        WethApprovalTransaction,
        StreamTransaction,
        TreasuryNounTransferTransaction,
        FunctionCallTransaction,
        PayableFunctionCallTransaction,
        UnparsedFunctionCallTransaction,
        UnparsedPayableFunctionCallTransaction,
    )
}
