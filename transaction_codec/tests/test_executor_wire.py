"""Executor wire format tests."""

import unittest

from transaction_codec import (
    MAX_UINT256,
    MalformedInputError,
    RawTransaction,
    WireTransactions,
    from_wire,
    from_wire_transactions,
    to_wire,
)

ALICE = "0x" + "aa" * 20
OTHER = "0x" + "dd" * 20


class ExecutorWireTests(unittest.TestCase):
    def test_from_wire_builds_raw_transactions(self) -> None:
        raws = from_wire(
            [ALICE, OTHER],
            ["1500000000000000000", "0"],
            ["", "setValue(uint256)"],
            ["0x", "0x" + "00" * 31 + "07"],
        )
        self.assertEqual(
            raws[0],
            RawTransaction(target=ALICE, signature="", calldata="0x", value=1500000000000000000),
        )
        self.assertEqual(raws[1].value, 0)
        self.assertEqual(raws[1].signature, "setValue(uint256)")

    def test_to_wire_renders_values_as_strings(self) -> None:
        wire = to_wire([RawTransaction(target=ALICE, signature="", calldata="0x", value=10**18)])
        self.assertEqual(
            wire.to_dict(),
            {
                "targets": [ALICE],
                "values": ["1000000000000000000"],
                "signatures": [""],
                "calldatas": ["0x"],
            },
        )

    def test_dict_round_trip(self) -> None:
        data = {
            "targets": [OTHER],
            "values": ["3"],
            "signatures": [""],
            "calldatas": ["0xdeadbeef"],
        }
        raws = from_wire_transactions(WireTransactions.from_dict(data))
        self.assertEqual(to_wire(raws).to_dict(), data)

    def test_unequal_lengths_are_rejected(self) -> None:
        with self.assertRaises(MalformedInputError):
            from_wire([ALICE, OTHER], ["0"], [""], ["0x"])

    def test_missing_keys_are_rejected(self) -> None:
        with self.assertRaisesRegex(MalformedInputError, "calldatas"):
            WireTransactions.from_dict({"targets": [], "values": [], "signatures": []})

    def test_bad_values_are_rejected(self) -> None:
        for value in ("-1", "1.5", "0x10", ""):
            with self.subTest(value=value):
                with self.assertRaises(MalformedInputError):
                    from_wire([ALICE], [value], [""], ["0x"])

    def test_values_are_bounded_by_uint256(self) -> None:
        (raw,) = from_wire([ALICE], [str(MAX_UINT256)], [""], ["0x"])
        self.assertEqual(raw.value, MAX_UINT256)
        for value in (str(MAX_UINT256 + 1), "9" * 100):
            with self.subTest(value=value):
                with self.assertRaisesRegex(MalformedInputError, "uint256"):
                    from_wire([ALICE], [value], [""], ["0x"])

    def test_bad_calldata_is_rejected(self) -> None:
        for calldata in ("", "deadbeef", "0xabc", "0xzz"):
            with self.subTest(calldata=calldata):
                with self.assertRaises(MalformedInputError):
                    from_wire([ALICE], ["0"], [""], [calldata])


if __name__ == "__main__":
    unittest.main()
