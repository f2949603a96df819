"""Transaction codecs: one parse/unparse pair per readable transaction type.

Codecs are plain records. ``parse`` returns ``None`` when a raw transaction
is not its pattern and raises ``MalformedInputError`` when the pattern
matches but the arguments cannot be decoded. ``DEFAULT_CODECS`` is the
global try order; specific patterns come before the generic fallbacks.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from eth_utils import is_address, to_normalized_address

from abi_codec import (
    AbiCodecError,
    decode_calldata_with_signature,
    encode_arguments,
    parse_signature,
    signatures_match,
)
from contract_registry import ContractInfo, ContractRegistry

from .models import (
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

CURRENCY_CONTRACTS: Dict[Currency, str] = {
    Currency.USDC: "usdc-token",
    Currency.WETH: "weth-token",
}


@dataclass(frozen=True)
class CodecContext:
    chain_id: int
    registry: ContractRegistry


@dataclass(frozen=True)
class TransactionCodec:
    type: TransactionType
    parse: Callable[[RawTransaction, CodecContext], Optional[ReadableTransaction]]
    unparse: Callable[[Any, CodecContext], RawTransaction]


def _same_address(left: str, right: str) -> bool:
    if not is_address(left) or not is_address(right):
        return False
    return to_normalized_address(left) == to_normalized_address(right)


def _address(value: str) -> str:
    if not isinstance(value, str) or not is_address(value):
        raise MalformedInputError(f"Invalid address: {value!r}")
    return to_normalized_address(value)


def _match_call(
    raw: RawTransaction,
    context: CodecContext,
    contract_name: str,
    function_name: str,
) -> Optional[ContractInfo]:
    contract = context.registry.lookup(context.chain_id, contract_name)
    if contract is None or not _same_address(raw.target, contract.address):
        return None
    if not signatures_match(raw.signature, contract.function_signature(function_name)):
        return None
    return contract


def _decode(raw: RawTransaction) -> Tuple[Any, ...]:
    try:
        return decode_calldata_with_signature(raw.signature, raw.calldata).inputs
    except AbiCodecError as exc:
        raise MalformedInputError(
            f"Calldata for {raw.signature!r} on {raw.target} is malformed: {exc}"
        ) from exc


def _encode_call(
    contract: ContractInfo,
    function_name: str,
    arguments: Tuple[Any, ...],
    value: int = 0,
) -> RawTransaction:
    signature = contract.function_signature(function_name)
    _, types = parse_signature(signature)
    try:
        calldata = encode_arguments(types, arguments)
    except AbiCodecError as exc:
        raise MalformedInputError(f"Cannot encode {signature}: {exc}") from exc
    return RawTransaction(
        target=contract.address,
        signature=signature,
        calldata=calldata,
        value=value,
    )


def _resolve(context: CodecContext, name: str) -> ContractInfo:
    return context.registry.resolve_identifier(context.chain_id, name)


# -- native transfers -------------------------------------------------------


def _parse_payer_top_up(raw: RawTransaction, context: CodecContext):
    token_buyer = context.registry.lookup(context.chain_id, "token-buyer")
    if token_buyer is None or not raw.is_native_transfer:
        return None
    if not _same_address(raw.target, token_buyer.address):
        return None
    return PayerTopUpTransaction(value=raw.value)


def _unparse_payer_top_up(t: PayerTopUpTransaction, context: CodecContext):
    return RawTransaction(
        target=_resolve(context, "token-buyer").address,
        signature="",
        calldata="0x",
        value=t.value,
    )


def _parse_transfer(raw: RawTransaction, context: CodecContext):
    if not raw.is_native_transfer:
        return None
    return TransferTransaction(target=_address(raw.target), value=raw.value)


def _unparse_transfer(t: TransferTransaction, context: CodecContext):
    return RawTransaction(target=t.target, signature="", calldata="0x", value=t.value)


# -- stablecoin and weth ----------------------------------------------------


def _parse_usdc_transfer_via_payer(raw: RawTransaction, context: CodecContext):
    if raw.value != 0 or _match_call(raw, context, "payer", "sendOrRegisterDebt") is None:
        return None
    receiver, amount = _decode(raw)
    return UsdcTransferViaPayerTransaction(receiver_address=receiver, usdc_amount=amount)


def _unparse_usdc_transfer_via_payer(
    t: UsdcTransferViaPayerTransaction, context: CodecContext
):
    return _encode_call(
        _resolve(context, "payer"),
        "sendOrRegisterDebt",
        (t.receiver_address, t.usdc_amount),
    )


def _parse_usdc_approval(raw: RawTransaction, context: CodecContext):
    if raw.value != 0 or _match_call(raw, context, "usdc-token", "approve") is None:
        return None
    spender, amount = _decode(raw)
    return UsdcApprovalTransaction(spender_address=spender, usdc_amount=amount)


def _unparse_usdc_approval(t: UsdcApprovalTransaction, context: CodecContext):
    return _encode_call(
        _resolve(context, "usdc-token"),
        "approve",
        (t.spender_address, t.usdc_amount),
    )


def _parse_weth_deposit(raw: RawTransaction, context: CodecContext):
    if _match_call(raw, context, "weth-token", "deposit") is None:
        return None
    _decode(raw)
    return WethDepositTransaction(value=raw.value)


def _unparse_weth_deposit(t: WethDepositTransaction, context: CodecContext):
    return _encode_call(_resolve(context, "weth-token"), "deposit", (), value=t.value)


def _parse_weth_transfer(raw: RawTransaction, context: CodecContext):
    if raw.value != 0 or _match_call(raw, context, "weth-token", "transfer") is None:
        return None
    receiver, amount = _decode(raw)
    return WethTransferTransaction(receiver_address=receiver, weth_amount=amount)


def _unparse_weth_transfer(t: WethTransferTransaction, context: CodecContext):
    return _encode_call(
        _resolve(context, "weth-token"),
        "transfer",
        (t.receiver_address, t.weth_amount),
    )


def _parse_weth_approval(raw: RawTransaction, context: CodecContext):
    if raw.value != 0 or _match_call(raw, context, "weth-token", "approve") is None:
        return None
    spender, amount = _decode(raw)
    return WethApprovalTransaction(spender_address=spender, weth_amount=amount)


def _unparse_weth_approval(t: WethApprovalTransaction, context: CodecContext):
    return _encode_call(
        _resolve(context, "weth-token"),
        "approve",
        (t.spender_address, t.weth_amount),
    )


# -- streams and nouns ------------------------------------------------------


def _currency_for_token(context: CodecContext, token_address: str) -> Optional[Currency]:
    contract = context.registry.identify(context.chain_id, token_address)
    if contract is None:
        return None
    for currency, contract_name in CURRENCY_CONTRACTS.items():
        if contract.name == contract_name:
            return currency
    return None


def _parse_stream(raw: RawTransaction, context: CodecContext):
    if raw.value != 0 or _match_call(raw, context, "stream-factory", "createStream") is None:
        return None
    receiver, amount, token_address, start, stop, nonce, stream_address = _decode(raw)
    token = _currency_for_token(context, token_address)
    if token is None:
        return None
    return StreamTransaction(
        receiver_address=receiver,
        token=token,
        token_amount=amount,
        start_timestamp=start,
        end_timestamp=stop,
        stream_contract_address=stream_address,
        nonce=nonce,
    )


def _unparse_stream(t: StreamTransaction, context: CodecContext):
    if t.token not in CURRENCY_CONTRACTS:
        raise MalformedInputError(f"Streams cannot carry {t.token!r}.")
    token_contract = _resolve(context, CURRENCY_CONTRACTS[t.token])
    return _encode_call(
        _resolve(context, "stream-factory"),
        "createStream",
        (
            t.receiver_address,
            t.token_amount,
            token_contract.address,
            t.start_timestamp,
            t.end_timestamp,
            t.nonce,
            t.stream_contract_address,
        ),
    )


def _parse_treasury_noun_transfer(raw: RawTransaction, context: CodecContext):
    executor = context.registry.lookup(context.chain_id, "executor")
    if executor is None or raw.value != 0:
        return None
    if _match_call(raw, context, "token", "safeTransferFrom") is None:
        return None
    sender, receiver, noun_id = _decode(raw)
    if not _same_address(sender, executor.address):
        return None
    return TreasuryNounTransferTransaction(receiver_address=receiver, noun_id=noun_id)


def _unparse_treasury_noun_transfer(
    t: TreasuryNounTransferTransaction, context: CodecContext
):
    executor = _resolve(context, "executor")
    return _encode_call(
        _resolve(context, "token"),
        "safeTransferFrom",
        (executor.address, t.receiver_address, t.noun_id),
    )


# -- generic fallbacks ------------------------------------------------------


def _parse_unparsed_payable_function_call(raw: RawTransaction, context: CodecContext):
    if raw.signature != "" or raw.calldata == "0x" or raw.value == 0:
        return None
    return UnparsedPayableFunctionCallTransaction(
        target=_address(raw.target),
        calldata=raw.calldata,
        value=raw.value,
    )


def _unparse_unparsed_payable_function_call(
    t: UnparsedPayableFunctionCallTransaction, context: CodecContext
):
    return RawTransaction(target=t.target, signature="", calldata=t.calldata, value=t.value)


def _parse_unparsed_function_call(raw: RawTransaction, context: CodecContext):
    if raw.signature != "" or raw.calldata == "0x" or raw.value != 0:
        return None
    return UnparsedFunctionCallTransaction(target=_address(raw.target), calldata=raw.calldata)


def _unparse_unparsed_function_call(
    t: UnparsedFunctionCallTransaction, context: CodecContext
):
    return RawTransaction(target=t.target, signature="", calldata=t.calldata, value=0)


def _decode_function_call(raw: RawTransaction):
    try:
        return decode_calldata_with_signature(raw.signature, raw.calldata)
    except AbiCodecError as exc:
        raise MalformedInputError(
            f"Function call {raw.signature!r} on {raw.target} is malformed: {exc}"
        ) from exc


def _function_signature(name: str, input_types: Tuple[str, ...]) -> str:
    return f"{name}({','.join(input_types)})"


def _encode_function_call(t, value: int) -> RawTransaction:
    try:
        calldata = encode_arguments(t.function_input_types, t.function_inputs)
    except AbiCodecError as exc:
        raise MalformedInputError(f"Cannot encode {t.function_name}: {exc}") from exc
    return RawTransaction(
        target=t.target,
        signature=_function_signature(t.function_name, t.function_input_types),
        calldata=calldata,
        value=value,
    )


def _parse_payable_function_call(raw: RawTransaction, context: CodecContext):
    if raw.signature == "" or raw.value == 0:
        return None
    decoded = _decode_function_call(raw)
    return PayableFunctionCallTransaction(
        target=_address(raw.target),
        function_name=decoded.function_name,
        function_inputs=decoded.inputs,
        function_input_types=decoded.input_types,
        value=raw.value,
    )


def _unparse_payable_function_call(
    t: PayableFunctionCallTransaction, context: CodecContext
):
    return _encode_function_call(t, t.value)


def _parse_function_call(raw: RawTransaction, context: CodecContext):
    if raw.signature == "" or raw.value != 0:
        return None
    decoded = _decode_function_call(raw)
    return FunctionCallTransaction(
        target=_address(raw.target),
        function_name=decoded.function_name,
        function_inputs=decoded.inputs,
        function_input_types=decoded.input_types,
    )


def _unparse_function_call(t: FunctionCallTransaction, context: CodecContext):
    return _encode_function_call(t, 0)


PAYER_TOP_UP_CODEC = TransactionCodec(
    TransactionType.PAYER_TOP_UP, _parse_payer_top_up, _unparse_payer_top_up
)
TRANSFER_CODEC = TransactionCodec(
    TransactionType.TRANSFER, _parse_transfer, _unparse_transfer
)
USDC_TRANSFER_VIA_PAYER_CODEC = TransactionCodec(
    TransactionType.USDC_TRANSFER_VIA_PAYER,
    _parse_usdc_transfer_via_payer,
    _unparse_usdc_transfer_via_payer,
)
USDC_APPROVAL_CODEC = TransactionCodec(
    TransactionType.USDC_APPROVAL, _parse_usdc_approval, _unparse_usdc_approval
)
WETH_DEPOSIT_CODEC = TransactionCodec(
    TransactionType.WETH_DEPOSIT, _parse_weth_deposit, _unparse_weth_deposit
)
WETH_TRANSFER_CODEC = TransactionCodec(
    TransactionType.WETH_TRANSFER, _parse_weth_transfer, _unparse_weth_transfer
)
WETH_APPROVAL_CODEC = TransactionCodec(
    TransactionType.WETH_APPROVAL, _parse_weth_approval, _unparse_weth_approval
)
STREAM_CODEC = TransactionCodec(TransactionType.STREAM, _parse_stream, _unparse_stream)
TREASURY_NOUN_TRANSFER_CODEC = TransactionCodec(
    TransactionType.TREASURY_NOUN_TRANSFER,
    _parse_treasury_noun_transfer,
    _unparse_treasury_noun_transfer,
)
UNPARSED_PAYABLE_FUNCTION_CALL_CODEC = TransactionCodec(
    TransactionType.UNPARSED_PAYABLE_FUNCTION_CALL,
    _parse_unparsed_payable_function_call,
    _unparse_unparsed_payable_function_call,
)
UNPARSED_FUNCTION_CALL_CODEC = TransactionCodec(
    TransactionType.UNPARSED_FUNCTION_CALL,
    _parse_unparsed_function_call,
    _unparse_unparsed_function_call,
)
PAYABLE_FUNCTION_CALL_CODEC = TransactionCodec(
    TransactionType.PAYABLE_FUNCTION_CALL,
    _parse_payable_function_call,
    _unparse_payable_function_call,
)
FUNCTION_CALL_CODEC = TransactionCodec(
    TransactionType.FUNCTION_CALL, _parse_function_call, _unparse_function_call
)

DEFAULT_CODECS: Tuple[TransactionCodec, ...] = (
    PAYER_TOP_UP_CODEC,
    TRANSFER_CODEC,
    USDC_TRANSFER_VIA_PAYER_CODEC,
    USDC_APPROVAL_CODEC,
    WETH_DEPOSIT_CODEC,
    WETH_TRANSFER_CODEC,
    WETH_APPROVAL_CODEC,
    STREAM_CODEC,
    TREASURY_NOUN_TRANSFER_CODEC,
    UNPARSED_PAYABLE_FUNCTION_CALL_CODEC,
    UNPARSED_FUNCTION_CALL_CODEC,
    PAYABLE_FUNCTION_CALL_CODEC,
    FUNCTION_CALL_CODEC,
)
