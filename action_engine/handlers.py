"""Action handlers: one resolve/build pair per action type.

``resolve`` expands an action into its ordered readable transactions.
``build`` looks for the action's transaction pattern anywhere in a pool and
returns the action with the untouched transactions, or ``None``.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from eth_utils import is_address, to_normalized_address

from transaction_codec.models import (
    DECIMALS_BY_CURRENCY,
    Currency,
    MalformedInputError,
    PayerTopUpTransaction,
    ReadableTransaction,
    StreamTransaction,
    TransactionType,
    TransferTransaction,
    TreasuryNounTransferTransaction,
    UsdcTransferViaPayerTransaction,
    WethDepositTransaction,
    WethTransferTransaction,
)

from .models import (
    Action,
    ActionType,
    BuildResult,
    CustomTransactionAction,
    OneTimePaymentAction,
    PayerTopUpAction,
    StreamingPaymentAction,
    TreasuryNounTransferAction,
    parse_currency,
)
from .units import format_units, parse_units

Pool = Tuple[ReadableTransaction, ...]


class UnsupportedVariantError(ValueError):
    """Raised when an action's currency or variant is outside a handler's support."""


@dataclass(frozen=True)
class ActionHandler:
    type: ActionType
    transaction_types: Tuple[TransactionType, ...]
    resolve: Callable[[Action], Pool]
    build: Optional[Callable[[Pool], Optional[BuildResult]]] = None


def _without(transactions: Pool, indexes: Iterable[int]) -> Pool:
    consumed = set(indexes)
    return tuple(t for i, t in enumerate(transactions) if i not in consumed)


def _find(transactions: Pool, predicate, start: int = 0) -> Optional[int]:
    for index in range(start, len(transactions)):
        if predicate(transactions[index]):
            return index
    return None


def _of_type(transaction_type: TransactionType):
    return lambda t: t.type == transaction_type


def _address(value: str) -> str:
    if not isinstance(value, str) or not is_address(value):
        raise MalformedInputError(f"Invalid address: {value!r}")
    return to_normalized_address(value)


def _currency(action, supported: Tuple[Currency, ...]) -> Currency:
    currency = parse_currency(action.currency)
    if currency not in supported:
        raise UnsupportedVariantError(
            f"{action.type.value} does not support currency {action.currency!r}."
        )
    return currency


# -- one-time payment -------------------------------------------------------

ONE_TIME_PAYMENT_CURRENCIES = (Currency.ETH, Currency.USDC)


def resolve_one_time_payment(action: OneTimePaymentAction) -> Pool:
    currency = _currency(action, ONE_TIME_PAYMENT_CURRENCIES)
    amount = parse_units(action.amount, DECIMALS_BY_CURRENCY[currency])
    if currency == Currency.ETH:
        return (TransferTransaction(target=_address(action.target), value=amount),)
    return (
        UsdcTransferViaPayerTransaction(
            receiver_address=_address(action.target),
            usdc_amount=amount,
        ),
    )


def build_one_time_payment(transactions: Pool) -> Optional[BuildResult]:
    index = _find(transactions, _of_type(TransactionType.TRANSFER))
    if index is not None:
        transfer = transactions[index]
        action = OneTimePaymentAction(
            target=transfer.target,
            currency=Currency.ETH,
            amount=format_units(transfer.value, DECIMALS_BY_CURRENCY[Currency.ETH]),
        )
        return BuildResult(action, _without(transactions, (index,)))

    index = _find(transactions, _of_type(TransactionType.USDC_TRANSFER_VIA_PAYER))
    if index is not None:
        payment = transactions[index]
        action = OneTimePaymentAction(
            target=payment.receiver_address,
            currency=Currency.USDC,
            amount=format_units(payment.usdc_amount, DECIMALS_BY_CURRENCY[Currency.USDC]),
        )
        return BuildResult(action, _without(transactions, (index,)))

    return None


# -- streaming payment ------------------------------------------------------

STREAMING_PAYMENT_CURRENCIES = (Currency.USDC, Currency.WETH)


def resolve_streaming_payment(action: StreamingPaymentAction) -> Pool:
    """Create the stream first, then fund it.

    WETH streams wrap ETH before transferring it, so the deposit always
    precedes the transfer that spends it.
    """

    currency = _currency(action, STREAMING_PAYMENT_CURRENCIES)
    amount = parse_units(action.amount, DECIMALS_BY_CURRENCY[currency])
    stream_address = _address(action.stream_contract_address)
    stream = StreamTransaction(
        receiver_address=_address(action.target),
        token=currency,
        token_amount=amount,
        start_timestamp=int(action.start_timestamp),
        end_timestamp=int(action.end_timestamp),
        stream_contract_address=stream_address,
        nonce=int(action.nonce),
    )
    if currency == Currency.USDC:
        return (
            stream,
            UsdcTransferViaPayerTransaction(
                receiver_address=stream_address,
                usdc_amount=amount,
            ),
        )
    return (
        stream,
        WethDepositTransaction(value=amount),
        WethTransferTransaction(receiver_address=stream_address, weth_amount=amount),
    )


def _stream_funding(transactions: Pool, stream_index: int) -> Optional[Tuple[int, ...]]:
    stream = transactions[stream_index]
    if stream.token == Currency.USDC:
        funding = _find(
            transactions,
            lambda t: t.type == TransactionType.USDC_TRANSFER_VIA_PAYER
            and t.receiver_address == stream.stream_contract_address
            and t.usdc_amount == stream.token_amount,
            start=stream_index + 1,
        )
        return None if funding is None else (funding,)

    if stream.token == Currency.WETH:
        deposit = _find(
            transactions,
            lambda t: t.type == TransactionType.WETH_DEPOSIT
            and t.value == stream.token_amount,
            start=stream_index + 1,
        )
        if deposit is None:
            return None
        transfer = _find(
            transactions,
            lambda t: t.type == TransactionType.WETH_TRANSFER
            and t.receiver_address == stream.stream_contract_address
            and t.weth_amount == stream.token_amount,
            start=deposit + 1,
        )
        return None if transfer is None else (deposit, transfer)

    return None


def build_streaming_payment(transactions: Pool) -> Optional[BuildResult]:
    for index, transaction in enumerate(transactions):
        if transaction.type != TransactionType.STREAM:
            continue
        funding = _stream_funding(transactions, index)
        if funding is None:
            continue
        action = StreamingPaymentAction(
            target=transaction.receiver_address,
            currency=transaction.token,
            amount=format_units(
                transaction.token_amount, DECIMALS_BY_CURRENCY[transaction.token]
            ),
            start_timestamp=transaction.start_timestamp,
            end_timestamp=transaction.end_timestamp,
            stream_contract_address=transaction.stream_contract_address,
            nonce=transaction.nonce,
        )
        return BuildResult(action, _without(transactions, (index,) + funding))
    return None


# -- payer top-up and noun transfers ----------------------------------------


def resolve_payer_top_up(action: PayerTopUpAction) -> Pool:
    value = parse_units(action.amount, DECIMALS_BY_CURRENCY[Currency.ETH])
    return (PayerTopUpTransaction(value=value),)


def build_payer_top_up(transactions: Pool) -> Optional[BuildResult]:
    index = _find(transactions, _of_type(TransactionType.PAYER_TOP_UP))
    if index is None:
        return None
    top_up = transactions[index]
    action = PayerTopUpAction(
        amount=format_units(top_up.value, DECIMALS_BY_CURRENCY[Currency.ETH])
    )
    return BuildResult(action, _without(transactions, (index,)))


def resolve_treasury_noun_transfer(action: TreasuryNounTransferAction) -> Pool:
    if isinstance(action.noun_id, bool) or not isinstance(action.noun_id, int):
        raise UnsupportedVariantError("Noun id must be an integer.")
    if action.noun_id < 0:
        raise UnsupportedVariantError("Noun id must be non-negative.")
    return (
        TreasuryNounTransferTransaction(
            receiver_address=_address(action.target),
            noun_id=action.noun_id,
        ),
    )


def build_treasury_noun_transfer(transactions: Pool) -> Optional[BuildResult]:
    index = _find(transactions, _of_type(TransactionType.TREASURY_NOUN_TRANSFER))
    if index is None:
        return None
    transfer = transactions[index]
    action = TreasuryNounTransferAction(
        target=transfer.receiver_address,
        noun_id=transfer.noun_id,
    )
    return BuildResult(action, _without(transactions, (index,)))


# -- custom transaction -----------------------------------------------------


def resolve_custom_transaction(action: CustomTransactionAction) -> Pool:
    return tuple(action.transactions)


ONE_TIME_PAYMENT_HANDLER = ActionHandler(
    type=ActionType.ONE_TIME_PAYMENT,
    transaction_types=(
        TransactionType.TRANSFER,
        TransactionType.USDC_TRANSFER_VIA_PAYER,
    ),
    resolve=resolve_one_time_payment,
    build=build_one_time_payment,
)

STREAMING_PAYMENT_HANDLER = ActionHandler(
    type=ActionType.STREAMING_PAYMENT,
    transaction_types=(
        TransactionType.STREAM,
        TransactionType.USDC_TRANSFER_VIA_PAYER,
        TransactionType.WETH_DEPOSIT,
        TransactionType.WETH_TRANSFER,
    ),
    resolve=resolve_streaming_payment,
    build=build_streaming_payment,
)

PAYER_TOP_UP_HANDLER = ActionHandler(
    type=ActionType.PAYER_TOP_UP,
    transaction_types=(TransactionType.PAYER_TOP_UP,),
    resolve=resolve_payer_top_up,
    build=build_payer_top_up,
)

TREASURY_NOUN_TRANSFER_HANDLER = ActionHandler(
    type=ActionType.TREASURY_NOUN_TRANSFER,
    transaction_types=(TransactionType.TREASURY_NOUN_TRANSFER,),
    resolve=resolve_treasury_noun_transfer,
    build=build_treasury_noun_transfer,
)

CUSTOM_TRANSACTION_HANDLER = ActionHandler(
    type=ActionType.CUSTOM_TRANSACTION,
    transaction_types=tuple(TransactionType),
    resolve=resolve_custom_transaction,
)

# Streaming payments claim their payer funding before one-time payments can.
DEFAULT_HANDLERS: Tuple[ActionHandler, ...] = (
    STREAMING_PAYMENT_HANDLER,
    ONE_TIME_PAYMENT_HANDLER,
    PAYER_TOP_UP_HANDLER,
    TREASURY_NOUN_TRANSFER_HANDLER,
    CUSTOM_TRANSACTION_HANDLER,
)
