"""Operator CLI for inspecting and authoring proposal transactions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from action_engine.engine import ResolutionEngine, UnrecognizedTypeError
from action_engine.handlers import UnsupportedVariantError
from action_engine.serialization import (
    SerializationError,
    action_from_dict,
    action_to_dict,
    transaction_to_dict,
)
from action_engine.summary import summarize_action
from action_engine.units import InvalidAmountError
from contract_registry import UnknownContractError
from engine_settings import configure_logging, get_settings
from transaction_codec.models import MalformedInputError
from transaction_codec.wire import WireTransactions, from_wire_transactions, to_wire

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="govkit")
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--contracts-file", default=settings.contracts_file)
    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser("decode")
    decode_parser.add_argument("--proposal", required=True)
    decode_parser.add_argument("--chain-id", type=int, default=settings.chain_id)
    decode_parser.set_defaults(func=_decode)

    encode_parser = subparsers.add_parser("encode")
    encode_parser.add_argument("--actions", required=True)
    encode_parser.add_argument("--chain-id", type=int, default=settings.chain_id)
    encode_parser.set_defaults(func=_encode)

    contracts_parser = subparsers.add_parser("contracts")
    contracts_parser.add_argument("--chain-id", type=int, default=settings.chain_id)
    contracts_parser.set_defaults(func=_contracts)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    except (
        InvalidAmountError,
        MalformedInputError,
        SerializationError,
        UnknownContractError,
        UnrecognizedTypeError,
        UnsupportedVariantError,
        json.JSONDecodeError,
        OSError,
    ) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


def _decode(args: argparse.Namespace) -> int:
    engine = _build_engine(args)
    wire = WireTransactions.from_dict(_load_json(args.proposal))
    raws = from_wire_transactions(wire)
    transactions = engine.parse_transactions(raws, args.chain_id)
    actions = engine.build_actions(transactions)
    output = {
        "chain_id": args.chain_id,
        "actions": [
            {**action_to_dict(action), "summary": summarize_action(action)}
            for action in actions
        ],
        "transactions": [transaction_to_dict(t) for t in transactions],
    }
    print(json.dumps(output, indent=2))
    return 0


def _encode(args: argparse.Namespace) -> int:
    engine = _build_engine(args)
    payload = _load_json(args.actions)
    if isinstance(payload, dict):
        payload = payload.get("actions")
    if not isinstance(payload, list):
        raise SerializationError("Actions must be a JSON list or an object with 'actions'.")
    actions = [action_from_dict(item) for item in payload]
    raws = engine.encode_actions(actions, args.chain_id)
    print(json.dumps(to_wire(raws).to_dict(), indent=2))
    return 0


def _contracts(args: argparse.Namespace) -> int:
    engine = _build_engine(args)
    contracts = engine.registry.contracts(args.chain_id)
    if not contracts:
        raise UnknownContractError(f"No contracts registered for chain {args.chain_id}.")
    print(json.dumps([info.to_dict() for info in contracts], indent=2))
    return 0


def _build_engine(args: argparse.Namespace) -> ResolutionEngine:
    settings = get_settings()
    contracts_file = Path(args.contracts_file) if args.contracts_file else None
    if contracts_file == settings.contracts_file:
        registry = settings.build_registry()
    else:
        registry = settings.model_copy(update={"contracts_file": contracts_file}).build_registry()
    return ResolutionEngine(registry=registry)


def _load_json(source: str) -> Any:
    if source == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(source).read_text())


if __name__ == "__main__":
    raise SystemExit(main())
