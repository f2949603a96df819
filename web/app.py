"""HTTP API for decoding and encoding proposal transactions."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

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
from transaction_codec.wire import from_wire, to_wire

logger = logging.getLogger(__name__)

configure_logging(get_settings().log_level)

app = FastAPI(title="govkit", description="Proposal action resolution API")


class DecodeRequest(BaseModel):
    targets: List[str]
    values: List[str]
    signatures: List[str]
    calldatas: List[str]
    chain_id: Optional[int] = None


class EncodeRequest(BaseModel):
    actions: List[dict]
    chain_id: Optional[int] = None


async def _handle_errors(request: Request, exc: Exception):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=400)


for _exc_class in (
    InvalidAmountError,
    MalformedInputError,
    SerializationError,
    UnknownContractError,
    UnrecognizedTypeError,
    UnsupportedVariantError,
    ValueError,
):
    app.add_exception_handler(_exc_class, _handle_errors)


@app.get("/api/status")
async def status():
    settings = get_settings()
    engine = _get_engine()
    return {
        "status": "ok",
        "default_chain_id": settings.chain_id,
        "chain_ids": list(engine.registry.chain_ids()),
        "transaction_types": [codec.type.value for codec in engine.codecs],
        "action_types": [handler.type.value for handler in engine.handlers],
    }


@app.get("/api/contracts/{chain_id}")
async def contracts(chain_id: int):
    entries = _get_engine().registry.contracts(chain_id)
    if not entries:
        raise UnknownContractError(f"No contracts registered for chain {chain_id}.")
    return {"chain_id": chain_id, "contracts": [info.to_dict() for info in entries]}


@app.post("/api/decode")
async def decode(payload: DecodeRequest):
    chain_id = _chain_id(payload.chain_id)
    engine = _get_engine()
    raws = from_wire(payload.targets, payload.values, payload.signatures, payload.calldatas)
    transactions = engine.parse_transactions(raws, chain_id)
    actions = engine.build_actions(transactions)
    return {
        "chain_id": chain_id,
        "actions": [
            {**action_to_dict(action), "summary": summarize_action(action)}
            for action in actions
        ],
        "transactions": [transaction_to_dict(t) for t in transactions],
    }


@app.post("/api/encode")
async def encode(payload: EncodeRequest):
    chain_id = _chain_id(payload.chain_id)
    actions = [action_from_dict(item) for item in payload.actions]
    raws = _get_engine().encode_actions(actions, chain_id)
    return {"chain_id": chain_id, **to_wire(raws).to_dict()}


@lru_cache(maxsize=1)
def _get_engine() -> ResolutionEngine:
    return ResolutionEngine(registry=get_settings().build_registry())


def _chain_id(requested: Optional[int]) -> int:
    return requested if requested is not None else get_settings().chain_id


def _reset_state() -> None:
    _get_engine.cache_clear()
