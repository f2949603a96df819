"""Governance action models."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple, Union

from transaction_codec.models import Currency, ReadableTransaction


class ActionType(Enum):
    ONE_TIME_PAYMENT = "one-time-payment"
    STREAMING_PAYMENT = "streaming-payment"
    PAYER_TOP_UP = "payer-top-up"
    TREASURY_NOUN_TRANSFER = "treasury-noun-transfer"
    CUSTOM_TRANSACTION = "custom-transaction"


@dataclass(frozen=True)
class OneTimePaymentAction:
    type: ClassVar[ActionType] = ActionType.ONE_TIME_PAYMENT

    target: str
    currency: Currency
    amount: str


@dataclass(frozen=True)
class StreamingPaymentAction:
    """Pay ``amount`` linearly between two unix timestamps through a stream contract."""

    type: ClassVar[ActionType] = ActionType.STREAMING_PAYMENT

    target: str
    currency: Currency
    amount: str
    start_timestamp: int
    end_timestamp: int
    stream_contract_address: str
    nonce: int = 0


@dataclass(frozen=True)
class PayerTopUpAction:
    type: ClassVar[ActionType] = ActionType.PAYER_TOP_UP

    amount: str


@dataclass(frozen=True)
class TreasuryNounTransferAction:
    type: ClassVar[ActionType] = ActionType.TREASURY_NOUN_TRANSFER

    target: str
    noun_id: int


@dataclass(frozen=True)
class CustomTransactionAction:
    """Opaque bundle of transactions no other action recognizes."""

    type: ClassVar[ActionType] = ActionType.CUSTOM_TRANSACTION

    transactions: Tuple[ReadableTransaction, ...]


Action = Union[
    OneTimePaymentAction,
    StreamingPaymentAction,
    PayerTopUpAction,
    TreasuryNounTransferAction,
    CustomTransactionAction,
]

ACTION_CLASSES: Dict[ActionType, type] = {
    cls.type: cls
    for cls in (
        OneTimePaymentAction,
        StreamingPaymentAction,
        PayerTopUpAction,
        TreasuryNounTransferAction,
        CustomTransactionAction,
    )
}


@dataclass(frozen=True)
class BuildResult:
    action: Action
    remaining_transactions: Tuple[ReadableTransaction, ...]


def parse_currency(value: object) -> Optional[Currency]:
    if isinstance(value, Currency):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for currency in Currency:
            if currency.value == normalized:
                return currency
    return None
