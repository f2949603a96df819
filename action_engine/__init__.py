from .engine import ResolutionEngine, UnrecognizedTypeError
from .handlers import DEFAULT_HANDLERS, ActionHandler, UnsupportedVariantError
from .models import (
    ACTION_CLASSES,
    Action,
    ActionType,
    BuildResult,
    CustomTransactionAction,
    OneTimePaymentAction,
    PayerTopUpAction,
    StreamingPaymentAction,
    TreasuryNounTransferAction,
)
from .serialization import (
    SerializationError,
    action_from_dict,
    action_to_dict,
    raw_transaction_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from .summary import explain_transaction, summarize_action
from .units import InvalidAmountError, format_units, parse_units

__all__ = [
    "ACTION_CLASSES",
    "Action",
    "ActionHandler",
    "ActionType",
    "BuildResult",
    "CustomTransactionAction",
    "DEFAULT_HANDLERS",
    "InvalidAmountError",
    "OneTimePaymentAction",
    "PayerTopUpAction",
    "ResolutionEngine",
    "SerializationError",
    "StreamingPaymentAction",
    "TreasuryNounTransferAction",
    "UnrecognizedTypeError",
    "UnsupportedVariantError",
    "action_from_dict",
    "action_to_dict",
    "explain_transaction",
    "format_units",
    "parse_units",
    "raw_transaction_to_dict",
    "summarize_action",
    "transaction_from_dict",
    "transaction_to_dict",
]
