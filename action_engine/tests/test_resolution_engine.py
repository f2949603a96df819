"""End-to-end resolution engine tests."""

import unittest
from collections import Counter

from abi_codec import encode_arguments
from action_engine import (
    CustomTransactionAction,
    OneTimePaymentAction,
    PayerTopUpAction,
    ResolutionEngine,
    StreamingPaymentAction,
    TreasuryNounTransferAction,
    UnrecognizedTypeError,
    UnsupportedVariantError,
)
from action_engine.handlers import ONE_TIME_PAYMENT_HANDLER
from transaction_codec import (
    DEFAULT_CODECS,
    Currency,
    MalformedInputError,
    RawTransaction,
    TransferTransaction,
    UnparsedFunctionCallTransaction,
    to_wire,
)
from transaction_codec.codecs import TRANSFER_CODEC

ALICE = "0x" + "aa" * 20
BOB = "0x" + "bb" * 20
STREAM = "0x" + "cc" * 20
OTHER = "0x" + "dd" * 20
PAYER = "0xd97bcd9f47cee35c0a9ec1dc40c1269afc9e8e1d"
TOKEN_BUYER = "0x4f2acdc74f6941390d9b1804fabc3e780388cfe5"


def _stream_action(currency=Currency.USDC, amount="1000") -> StreamingPaymentAction:
    return StreamingPaymentAction(
        target=ALICE,
        currency=currency,
        amount=amount,
        start_timestamp=1704067200,
        end_timestamp=1735689600,
        stream_contract_address=STREAM,
    )


class ResolutionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = ResolutionEngine()

    def test_eth_payment_encodes_to_native_transfer(self) -> None:
        action = OneTimePaymentAction(target=ALICE, currency=Currency.ETH, amount="1.5")
        raws = self.engine.encode_actions([action], 1)
        self.assertEqual(
            raws,
            (RawTransaction(target=ALICE, signature="", calldata="0x", value=1500000000000000000),),
        )
        self.assertEqual(to_wire(raws).values, ("1500000000000000000",))

    def test_usdc_payment_targets_the_payer(self) -> None:
        action = OneTimePaymentAction(target=BOB, currency=Currency.USDC, amount="250")
        (raw,) = self.engine.encode_actions([action], 1)
        self.assertEqual(raw.target, PAYER)
        self.assertEqual(raw.signature, "sendOrRegisterDebt(address,uint256)")
        self.assertEqual(raw.calldata, encode_arguments(("address", "uint256"), (BOB, 250000000)))
        self.assertEqual(raw.value, 0)

    def test_unrecognized_call_is_wrapped_as_custom(self) -> None:
        raws = [
            RawTransaction(target=ALICE, signature="", calldata="0x", value=10**18),
            RawTransaction(target=OTHER, signature="", calldata="0xdeadbeef"),
        ]
        with self.assertLogs("action_engine.engine", level="INFO") as logs:
            actions = self.engine.decompose(raws, 1)
        self.assertEqual(
            actions,
            (
                OneTimePaymentAction(target=ALICE, currency=Currency.ETH, amount="1"),
                CustomTransactionAction(
                    transactions=(UnparsedFunctionCallTransaction(target=OTHER, calldata="0xdeadbeef"),)
                ),
            ),
        )
        self.assertIn("Wrapping 1 unrecognized", logs.output[0])

    def test_wrong_argument_count_is_malformed(self) -> None:
        raw = RawTransaction(
            target=PAYER,
            signature="sendOrRegisterDebt(address,uint256)",
            calldata=encode_arguments(("address",), (BOB,)),
        )
        with self.assertRaises(MalformedInputError):
            self.engine.decompose([raw], 1)

    def test_invalid_utf8_argument_is_malformed(self) -> None:
        raw = RawTransaction(
            target=ALICE,
            signature="setName(string)",
            calldata=encode_arguments(("bytes",), (b"\xff\xfe",)),
        )
        with self.assertRaises(MalformedInputError):
            self.engine.decompose([raw], 1)

    def test_eth_payment_to_token_buyer_reads_as_top_up(self) -> None:
        payment = OneTimePaymentAction(target=TOKEN_BUYER, currency=Currency.ETH, amount="1")
        raws = self.engine.encode_actions([payment], 1)
        self.assertEqual(self.engine.decompose(raws, 1), (PayerTopUpAction(amount="1"),))

    def test_streams_round_trip(self) -> None:
        for action in (_stream_action(), _stream_action(Currency.WETH, "2.5")):
            with self.subTest(currency=action.currency):
                raws = self.engine.encode_actions([action], 1)
                self.assertEqual(self.engine.decompose(raws, 1), (action,))

    def test_stream_funding_is_not_claimed_as_a_payment(self) -> None:
        payment = OneTimePaymentAction(target=BOB, currency=Currency.USDC, amount="5")
        raws = self.engine.encode_actions([_stream_action(), payment], 1)
        self.assertEqual(self.engine.decompose(raws, 1), (_stream_action(), payment))

    def test_actions_come_back_in_handler_order(self) -> None:
        actions = [
            OneTimePaymentAction(target=ALICE, currency=Currency.ETH, amount="1"),
            PayerTopUpAction(amount="2"),
            TreasuryNounTransferAction(target=BOB, noun_id=7),
            _stream_action(),
        ]
        raws = self.engine.encode_actions(actions, 1)
        self.assertEqual(
            self.engine.decompose(raws, 1),
            (actions[3], actions[0], actions[1], actions[2]),
        )

    def test_decomposition_covers_every_transaction(self) -> None:
        raws = [
            RawTransaction(target=OTHER, signature="", calldata="0x01"),
            RawTransaction(target=ALICE, signature="", calldata="0x", value=7),
            RawTransaction(
                target=OTHER,
                signature="setValue(uint256)",
                calldata=encode_arguments(("uint256",), (9,)),
            ),
            *self.engine.encode_actions([_stream_action(), PayerTopUpAction(amount="1")], 1),
        ]
        transactions = self.engine.parse_transactions(raws, 1)
        actions = self.engine.decompose(raws, 1)
        self.assertEqual(Counter(self.engine.resolve_actions(actions)), Counter(transactions))

    def test_decompose_is_idempotent(self) -> None:
        raws = [
            RawTransaction(target=OTHER, signature="", calldata="0x01"),
            RawTransaction(target=ALICE, signature="", calldata="0x", value=7),
            *self.engine.encode_actions([_stream_action(Currency.WETH, "1")], 1),
        ]
        first = self.engine.decompose(raws, 1)
        second = self.engine.decompose(self.engine.encode_actions(first, 1), 1)
        self.assertEqual(first, second)

    def test_empty_proposal(self) -> None:
        self.assertEqual(self.engine.decompose([], 1), ())
        self.assertEqual(self.engine.encode_actions([], 1), ())

    def test_unsupported_currency_raises(self) -> None:
        for currency in (Currency.WETH, "dai"):
            with self.subTest(currency=currency):
                action = OneTimePaymentAction(target=ALICE, currency=currency, amount="1")
                with self.assertRaises(UnsupportedVariantError):
                    self.engine.encode_actions([action], 1)

    def test_unknown_types_raise(self) -> None:
        with self.assertRaises(UnrecognizedTypeError):
            self.engine.resolve_action(object())
        with self.assertRaises(UnrecognizedTypeError):
            self.engine.unparse_transaction(object(), 1)

    def test_unmatched_raw_transaction_raises(self) -> None:
        engine = ResolutionEngine(codecs=(TRANSFER_CODEC,))
        raw = RawTransaction(target=OTHER, signature="", calldata="0x01")
        with self.assertRaises(UnrecognizedTypeError):
            engine.parse_transaction(raw, 1)

    def test_missing_handler_raises(self) -> None:
        engine = ResolutionEngine(handlers=(ONE_TIME_PAYMENT_HANDLER,))
        with self.assertRaises(UnrecognizedTypeError):
            engine.resolve_action(PayerTopUpAction(amount="1"))

    def test_reduced_handler_set(self) -> None:
        engine = ResolutionEngine(handlers=(ONE_TIME_PAYMENT_HANDLER,))
        transfer = TransferTransaction(target=ALICE, value=1)
        self.assertEqual(
            engine.build_actions((transfer,)),
            (OneTimePaymentAction(target=ALICE, currency=Currency.ETH, amount="0.000000000000000001"),),
        )

    def test_duplicate_registration_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ResolutionEngine(codecs=DEFAULT_CODECS + (TRANSFER_CODEC,))
        with self.assertRaises(ValueError):
            ResolutionEngine(handlers=(ONE_TIME_PAYMENT_HANDLER, ONE_TIME_PAYMENT_HANDLER))


if __name__ == "__main__":
    unittest.main()
