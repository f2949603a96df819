from .codecs import CURRENCY_CONTRACTS, DEFAULT_CODECS, CodecContext, TransactionCodec
from .models import (
    DECIMALS_BY_CURRENCY,
    MAX_UINT256,
    TRANSACTION_CLASSES,
    Currency,
    FunctionCallTransaction,
    MalformedInputError,
    PayableFunctionCallTransaction,
    PayerTopUpTransaction,
    RawTransaction,
    ReadableTransaction,
    StreamTransaction,
    TransactionType,
    TransferTransaction,
    TreasuryNounTransferTransaction,
    UnparsedFunctionCallTransaction,
    UnparsedPayableFunctionCallTransaction,
    UsdcApprovalTransaction,
    UsdcTransferViaPayerTransaction,
    WethApprovalTransaction,
    WethDepositTransaction,
    WethTransferTransaction,
)
from .wire import WireTransactions, from_wire, from_wire_transactions, to_wire

__all__ = [
    "CURRENCY_CONTRACTS",
    "CodecContext",
    "Currency",
    "DECIMALS_BY_CURRENCY",
    "DEFAULT_CODECS",
    "FunctionCallTransaction",
    "MAX_UINT256",
    "MalformedInputError",
    "PayableFunctionCallTransaction",
    "PayerTopUpTransaction",
    "RawTransaction",
    "ReadableTransaction",
    "StreamTransaction",
    "TRANSACTION_CLASSES",
    "TransactionCodec",
    "TransactionType",
    "TransferTransaction",
    "TreasuryNounTransferTransaction",
    "UnparsedFunctionCallTransaction",
    "UnparsedPayableFunctionCallTransaction",
    "UsdcApprovalTransaction",
    "UsdcTransferViaPayerTransaction",
    "WethApprovalTransaction",
    "WethDepositTransaction",
    "WethTransferTransaction",
    "WireTransactions",
    "from_wire",
    "from_wire_transactions",
    "to_wire",
]
