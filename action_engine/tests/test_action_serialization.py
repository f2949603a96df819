"""Dict conversion tests for actions and transactions."""

import json
import unittest

from action_engine import (
    CustomTransactionAction,
    OneTimePaymentAction,
    ResolutionEngine,
    SerializationError,
    StreamingPaymentAction,
    TreasuryNounTransferAction,
    UnsupportedVariantError,
    action_from_dict,
    action_to_dict,
    raw_transaction_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from transaction_codec import (
    Currency,
    FunctionCallTransaction,
    RawTransaction,
    StreamTransaction,
    UnparsedFunctionCallTransaction,
)

ALICE = "0x" + "aa" * 20
STREAM = "0x" + "cc" * 20
OTHER = "0x" + "dd" * 20


class ActionSerializationTests(unittest.TestCase):
    def test_one_time_payment_dict(self) -> None:
        action = OneTimePaymentAction(target=ALICE, currency=Currency.ETH, amount="1.5")
        data = action_to_dict(action)
        self.assertEqual(
            data,
            {"type": "one-time-payment", "target": ALICE, "currency": "eth", "amount": "1.5"},
        )
        self.assertEqual(action_from_dict(data), action)

    def test_streaming_payment_coerces_numbers(self) -> None:
        action = action_from_dict(
            {
                "type": "streaming-payment",
                "target": ALICE,
                "currency": "USDC",
                "amount": 1000,
                "start_timestamp": "1704067200",
                "end_timestamp": 1735689600,
                "stream_contract_address": STREAM,
            }
        )
        self.assertEqual(
            action,
            StreamingPaymentAction(
                target=ALICE,
                currency=Currency.USDC,
                amount="1000",
                start_timestamp=1704067200,
                end_timestamp=1735689600,
                stream_contract_address=STREAM,
                nonce=0,
            ),
        )

    def test_custom_transaction_dict_survives_json(self) -> None:
        action = CustomTransactionAction(
            transactions=(
                FunctionCallTransaction(
                    target=OTHER,
                    function_name="setData",
                    function_inputs=(b"\x01" * 32, 7, (ALICE, True)),
                    function_input_types=("bytes32", "uint256", "(address,bool)"),
                ),
                UnparsedFunctionCallTransaction(target=OTHER, calldata="0x01"),
            )
        )
        data = json.loads(json.dumps(action_to_dict(action)))
        self.assertEqual(data["transactions"][0]["function_inputs"][0], "0x" + "01" * 32)
        self.assertEqual(action_from_dict(data), action)

    def test_stream_transaction_dict(self) -> None:
        transaction = StreamTransaction(
            receiver_address=ALICE,
            token=Currency.WETH,
            token_amount=10**18,
            start_timestamp=1,
            end_timestamp=2,
            stream_contract_address=STREAM,
        )
        data = transaction_to_dict(transaction)
        self.assertEqual(data["type"], "stream")
        self.assertEqual(data["token"], "weth")
        self.assertEqual(data["token_amount"], "1000000000000000000")
        self.assertEqual(transaction_from_dict(data), transaction)

    def test_raw_transaction_dict(self) -> None:
        raw = RawTransaction(target=ALICE, signature="", calldata="0x", value=5)
        self.assertEqual(
            raw_transaction_to_dict(raw),
            {"target": ALICE, "signature": "", "calldata": "0x", "value": "5"},
        )

    def test_unknown_currency_fails_at_resolve_time(self) -> None:
        action = action_from_dict(
            {"type": "one-time-payment", "target": ALICE, "currency": "dai", "amount": "1"}
        )
        self.assertEqual(action.currency, "dai")
        with self.assertRaises(UnsupportedVariantError):
            ResolutionEngine().resolve_action(action)

    def test_invalid_shapes_raise(self) -> None:
        cases = (
            ["not", "a", "mapping"],
            {"type": "airdrop"},
            {"type": "one-time-payment", "target": ALICE},
            {"type": "treasury-noun-transfer", "target": ALICE, "noun_id": "seven"},
            {"type": "custom-transaction", "transactions": "0x"},
            {
                "type": "custom-transaction",
                "transactions": [{"type": "stream", "receiver_address": ALICE, "token": "dai",
                                  "token_amount": "1", "start_timestamp": "1",
                                  "end_timestamp": "2", "stream_contract_address": STREAM}],
            },
            {
                "type": "custom-transaction",
                "transactions": [{"type": "function-call", "target": OTHER,
                                  "function_name": "f", "function_inputs": [1, 2],
                                  "function_input_types": ["uint256"]}],
            },
            {
                "type": "custom-transaction",
                "transactions": [{"type": "function-call", "target": OTHER,
                                  "function_name": "f", "function_inputs": ["x"],
                                  "function_input_types": ["uint256"]}],
            },
        )
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(SerializationError):
                    action_from_dict(data)

    def test_noun_id_string_is_coerced(self) -> None:
        action = action_from_dict(
            {"type": "treasury-noun-transfer", "target": ALICE, "noun_id": "12"}
        )
        self.assertEqual(action, TreasuryNounTransferAction(target=ALICE, noun_id=12))


if __name__ == "__main__":
    unittest.main()
