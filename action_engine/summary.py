"""Plain-text descriptions of actions and readable transactions."""

from datetime import datetime, timezone

from transaction_codec.models import (
    DECIMALS_BY_CURRENCY,
    Currency,
    ReadableTransaction,
    TransactionType,
)

from .engine import UnrecognizedTypeError
from .models import Action, ActionType
from .units import format_units


def _eth(value: int) -> str:
    return format_units(value, DECIMALS_BY_CURRENCY[Currency.ETH])


def _usdc(value: int) -> str:
    return format_units(value, DECIMALS_BY_CURRENCY[Currency.USDC])


def _date(timestamp: int) -> str:
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%b %d, %Y")
    except (ValueError, OverflowError, OSError):
        return f"timestamp {timestamp}"


def explain_transaction(t: ReadableTransaction) -> str:
    transaction_type = getattr(t, "type", None)

    if transaction_type == TransactionType.TRANSFER:
        return f"Transfer {_eth(t.value)} ETH to {t.target}"
    if transaction_type == TransactionType.PAYER_TOP_UP:
        return f"Top up the payer with {_eth(t.value)} ETH"
    if transaction_type == TransactionType.USDC_TRANSFER_VIA_PAYER:
        return f"Transfer {_usdc(t.usdc_amount)} USDC to {t.receiver_address}"
    if transaction_type == TransactionType.USDC_APPROVAL:
        return f"Approve {t.spender_address} to spend {_usdc(t.usdc_amount)} USDC"
    if transaction_type == TransactionType.WETH_DEPOSIT:
        return f"Deposit {_eth(t.value)} ETH to the WETH contract"
    if transaction_type == TransactionType.WETH_TRANSFER:
        return f"Transfer {_eth(t.weth_amount)} WETH to {t.receiver_address}"
    if transaction_type == TransactionType.WETH_APPROVAL:
        return f"Approve {t.spender_address} to spend {_eth(t.weth_amount)} WETH"
    if transaction_type == TransactionType.STREAM:
        amount = format_units(t.token_amount, DECIMALS_BY_CURRENCY[t.token])
        return (
            f"Stream {amount} {t.token.value.upper()} to {t.receiver_address} "
            f"between {_date(t.start_timestamp)} and {_date(t.end_timestamp)}"
        )
    if transaction_type == TransactionType.TREASURY_NOUN_TRANSFER:
        return f"Transfer Noun {t.noun_id} to {t.receiver_address}"
    if transaction_type in (
        TransactionType.FUNCTION_CALL,
        TransactionType.UNPARSED_FUNCTION_CALL,
    ):
        return f"Function call to contract {t.target}"
    if transaction_type in (
        TransactionType.PAYABLE_FUNCTION_CALL,
        TransactionType.UNPARSED_PAYABLE_FUNCTION_CALL,
    ):
        return f"{_eth(t.value)} ETH payable function call to contract {t.target}"

    raise UnrecognizedTypeError(f"Unknown transaction type: {transaction_type!r}")


def summarize_action(action: Action) -> str:
    action_type = getattr(action, "type", None)

    if action_type == ActionType.ONE_TIME_PAYMENT:
        return f"Transfer {action.amount} {_symbol(action.currency)} to {action.target}"
    if action_type == ActionType.STREAMING_PAYMENT:
        return (
            f"Stream {action.amount} {_symbol(action.currency)} to {action.target} "
            f"between {_date(action.start_timestamp)} and {_date(action.end_timestamp)}"
        )
    if action_type == ActionType.PAYER_TOP_UP:
        return f"Top up the payer with {action.amount} ETH"
    if action_type == ActionType.TREASURY_NOUN_TRANSFER:
        return f"Transfer Noun {action.noun_id} to {action.target}"
    if action_type == ActionType.CUSTOM_TRANSACTION:
        if len(action.transactions) == 1:
            return explain_transaction(action.transactions[0])
        return f"Custom transaction bundle ({len(action.transactions)} transactions)"

    raise UnrecognizedTypeError(f"Unknown action type: {action_type!r}")


def _symbol(currency) -> str:
    value = currency.value if isinstance(currency, Currency) else str(currency)
    return value.upper()
