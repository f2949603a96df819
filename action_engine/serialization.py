"""JSON-friendly dict conversion for actions and transactions."""

from dataclasses import MISSING, fields
from typing import Any, Dict, Mapping

from abi_codec import AbiCodecError, from_json_value, to_json_value
from transaction_codec.models import (
    TRANSACTION_CLASSES,
    Currency,
    FunctionCallTransaction,
    PayableFunctionCallTransaction,
    RawTransaction,
    ReadableTransaction,
    StreamTransaction,
    TransactionType,
)

from .models import (
    ACTION_CLASSES,
    Action,
    ActionType,
    CustomTransactionAction,
    StreamingPaymentAction,
    TreasuryNounTransferAction,
    parse_currency,
)


class SerializationError(ValueError):
    """Raised when a dict does not describe a known action or transaction."""


_FUNCTION_CALL_TYPES = (FunctionCallTransaction, PayableFunctionCallTransaction)
_INT_FIELDS = {
    "value",
    "usdc_amount",
    "weth_amount",
    "token_amount",
    "start_timestamp",
    "end_timestamp",
    "nonce",
    "noun_id",
}


def raw_transaction_to_dict(raw: RawTransaction) -> Dict[str, Any]:
    return {
        "target": raw.target,
        "signature": raw.signature,
        "calldata": raw.calldata,
        "value": str(raw.value),
    }


def transaction_to_dict(transaction: ReadableTransaction) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": transaction.type.value}
    for name in _field_names(transaction):
        value = getattr(transaction, name)
        if name == "function_inputs":
            value = [
                to_json_value(type_str, item)
                for type_str, item in zip(transaction.function_input_types, value)
            ]
        elif name == "function_input_types":
            value = list(value)
        elif name == "token":
            value = value.value
        elif name in _INT_FIELDS:
            value = str(value)
        data[name] = value
    return data


def transaction_from_dict(data: Mapping[str, Any]) -> ReadableTransaction:
    _require_mapping(data, "transaction")
    transaction_type = _enum_member(TransactionType, data.get("type"))
    cls = TRANSACTION_CLASSES[transaction_type]
    kwargs = _field_values(cls, data)
    if cls is StreamTransaction:
        token = parse_currency(kwargs["token"])
        if token is None:
            raise SerializationError(f"Unknown stream token: {kwargs['token']!r}")
        kwargs["token"] = token
    if cls in _FUNCTION_CALL_TYPES:
        types = tuple(kwargs["function_input_types"])
        inputs = tuple(kwargs["function_inputs"])
        if len(types) != len(inputs):
            raise SerializationError(
                "function_inputs and function_input_types differ in length."
            )
        kwargs["function_input_types"] = types
        kwargs["function_inputs"] = inputs

    try:
        if cls in _FUNCTION_CALL_TYPES:
            kwargs["function_inputs"] = tuple(
                from_json_value(type_str, item)
                for type_str, item in zip(kwargs["function_input_types"], inputs)
            )
        for name in _INT_FIELDS.intersection(kwargs):
            kwargs[name] = int(kwargs[name])
    except (AbiCodecError, TypeError, ValueError) as exc:
        raise SerializationError(f"Invalid {transaction_type.value} transaction: {exc}") from exc
    return cls(**kwargs)


def action_to_dict(action: Action) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": action.type.value}
    if isinstance(action, CustomTransactionAction):
        data["transactions"] = [transaction_to_dict(t) for t in action.transactions]
        return data
    for name in _field_names(action):
        value = getattr(action, name)
        if name == "currency" and isinstance(value, Currency):
            value = value.value
        data[name] = value
    return data


def action_from_dict(data: Mapping[str, Any]) -> Action:
    _require_mapping(data, "action")
    action_type = _enum_member(ActionType, data.get("type"))
    cls = ACTION_CLASSES[action_type]
    if cls is CustomTransactionAction:
        transactions = data.get("transactions")
        if not isinstance(transactions, list):
            raise SerializationError("custom-transaction requires a transactions list.")
        return CustomTransactionAction(
            transactions=tuple(transaction_from_dict(t) for t in transactions)
        )

    kwargs = _field_values(cls, data)
    if "currency" in kwargs:
        # Unknown symbols are kept as given and rejected when the action is resolved.
        kwargs["currency"] = parse_currency(kwargs["currency"]) or kwargs["currency"]
    if "amount" in kwargs:
        kwargs["amount"] = str(kwargs["amount"])
    try:
        if cls is StreamingPaymentAction:
            for name in ("start_timestamp", "end_timestamp", "nonce"):
                if name in kwargs:
                    kwargs[name] = int(kwargs[name])
        if cls is TreasuryNounTransferAction:
            kwargs["noun_id"] = int(kwargs["noun_id"])
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Invalid {action_type.value} action: {exc}") from exc
    return cls(**kwargs)


def _require_mapping(data, kind: str) -> None:
    if not isinstance(data, Mapping):
        raise SerializationError(f"Each {kind} must be a JSON object.")


def _enum_member(enum_cls, value):
    for member in enum_cls:
        if member.value == value:
            return member
    raise SerializationError(f"Unknown {enum_cls.__name__} {value!r}.")


def _field_values(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
    record_fields = fields(cls)
    missing = [
        field.name
        for field in record_fields
        if field.default is MISSING
        and field.default_factory is MISSING
        and field.name not in data
    ]
    if missing:
        raise SerializationError(
            f"{cls.__name__} is missing fields: {', '.join(missing)}."
        )
    return {field.name: data[field.name] for field in record_fields if field.name in data}


def _field_names(record) -> tuple:
    return tuple(field.name for field in fields(record))
