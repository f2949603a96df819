"""Decode and contracts command tests for the operator CLI."""

import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path
from unittest import mock

from action_engine import ResolutionEngine, StreamingPaymentAction
from operator_cli import cli
from transaction_codec import Currency, to_wire

ALICE = "0x" + "aa" * 20
STREAM = "0x" + "cc" * 20
OTHER = "0x" + "dd" * 20

PROPOSAL = {
    "targets": [ALICE, OTHER],
    "values": ["1000000000000000000", "0"],
    "signatures": ["", ""],
    "calldatas": ["0x", "0xdeadbeef"],
}


class OperatorCliDecodeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.TemporaryDirectory()
        self.proposal_path = Path(self.tempdir.name) / "proposal.json"

    def tearDown(self) -> None:
        self.tempdir.cleanup()

    def _run(self, args):
        out_buf = StringIO()
        err_buf = StringIO()
        with redirect_stdout(out_buf), redirect_stderr(err_buf):
            code = cli.main(args)
        return code, out_buf.getvalue(), err_buf.getvalue()

    def _write(self, data) -> str:
        self.proposal_path.write_text(json.dumps(data))
        return str(self.proposal_path)

    def test_decode_reports_actions_with_summaries(self) -> None:
        code, output, _ = self._run(["decode", "--proposal", self._write(PROPOSAL)])
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertEqual(payload["chain_id"], 1)
        self.assertEqual(
            [action["type"] for action in payload["actions"]],
            ["one-time-payment", "custom-transaction"],
        )
        self.assertEqual(payload["actions"][0]["summary"], f"Transfer 1 ETH to {ALICE}")
        self.assertEqual(
            payload["actions"][1]["transactions"],
            [{"type": "unparsed-function-call", "target": OTHER, "calldata": "0xdeadbeef"}],
        )
        self.assertEqual(len(payload["transactions"]), 2)

    def test_decode_summarizes_far_future_streams(self) -> None:
        stream = StreamingPaymentAction(
            target=ALICE,
            currency=Currency.USDC,
            amount="1000",
            start_timestamp=1704067200,
            end_timestamp=10**12,
            stream_contract_address=STREAM,
        )
        wire = to_wire(ResolutionEngine().encode_actions([stream], 1)).to_dict()
        code, output, err = self._run(["decode", "--proposal", self._write(wire)])
        self.assertEqual(code, 0, err)
        (action,) = json.loads(output)["actions"]
        self.assertEqual(action["end_timestamp"], 10**12)
        self.assertTrue(action["summary"].endswith("and timestamp 1000000000000"))

    def test_decode_reads_stdin(self) -> None:
        with mock.patch("sys.stdin", StringIO(json.dumps(PROPOSAL))):
            code, output, _ = self._run(["decode", "--proposal", "-"])
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(output)["actions"]), 2)

    def test_decode_rejects_malformed_proposals(self) -> None:
        bad = dict(PROPOSAL, values=["1"])
        code, output, err = self._run(["decode", "--proposal", self._write(bad)])
        self.assertEqual(code, 2)
        self.assertEqual(output, "")
        self.assertIn("ERROR:", err)
        self.assertIn("equal lengths", err)

    def test_decode_rejects_missing_file(self) -> None:
        missing = str(Path(self.tempdir.name) / "missing.json")
        code, _, err = self._run(["decode", "--proposal", missing])
        self.assertEqual(code, 2)
        self.assertIn("ERROR:", err)

    def test_contracts_lists_registry(self) -> None:
        code, output, _ = self._run(["contracts"])
        self.assertEqual(code, 0)
        names = {entry["name"] for entry in json.loads(output)}
        self.assertIn("payer", names)
        self.assertIn("stream-factory", names)

    def test_contracts_for_unknown_chain_fails(self) -> None:
        code, _, err = self._run(["contracts", "--chain-id", "999"])
        self.assertEqual(code, 2)
        self.assertIn("chain 999", err)

    def test_contracts_file_adds_chain(self) -> None:
        contracts_path = Path(self.tempdir.name) / "contracts.json"
        contracts_path.write_text(json.dumps({"5": {"payer": {"address": "0x" + "12" * 20}}}))
        code, output, _ = self._run(
            ["--contracts-file", str(contracts_path), "contracts", "--chain-id", "5"]
        )
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)[0]["address"], "0x" + "12" * 20)


if __name__ == "__main__":
    unittest.main()
