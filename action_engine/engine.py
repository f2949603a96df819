"""Resolution engine: decompose raw proposal transactions into actions and back."""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from contract_registry import ContractRegistry, default_registry
from transaction_codec.codecs import DEFAULT_CODECS, CodecContext, TransactionCodec
from transaction_codec.models import RawTransaction, ReadableTransaction, TransactionType

from .handlers import DEFAULT_HANDLERS, ActionHandler
from .models import Action, ActionType, CustomTransactionAction

logger = logging.getLogger(__name__)


class UnrecognizedTypeError(ValueError):
    """Raised when an action or transaction type has no registered handler or codec."""


class ResolutionEngine:
    """Translates between raw transactions, readable transactions and actions.

    Codecs and handlers are tried in registration order; the first match
    wins. The engine holds no state beyond its read-only registries, so one
    instance can be shared freely.
    """

    def __init__(
        self,
        codecs: Sequence[TransactionCodec] = DEFAULT_CODECS,
        handlers: Sequence[ActionHandler] = DEFAULT_HANDLERS,
        registry: Optional[ContractRegistry] = None,
    ) -> None:
        self._codecs = tuple(codecs)
        self._handlers = tuple(handlers)
        self._codecs_by_type = _index_by_type(self._codecs, "codec")
        self._handlers_by_type = _index_by_type(self._handlers, "handler")
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> ContractRegistry:
        return self._registry

    @property
    def codecs(self) -> Tuple[TransactionCodec, ...]:
        return self._codecs

    @property
    def handlers(self) -> Tuple[ActionHandler, ...]:
        return self._handlers

    def codec_for(self, transaction_type: TransactionType) -> TransactionCodec:
        codec = self._codecs_by_type.get(transaction_type)
        if codec is None:
            raise UnrecognizedTypeError(f"Unknown transaction type: {transaction_type!r}")
        return codec

    def handler_for(self, action_type: ActionType) -> ActionHandler:
        handler = self._handlers_by_type.get(action_type)
        if handler is None:
            raise UnrecognizedTypeError(f"Unknown action type: {action_type!r}")
        return handler

    # -- raw <-> readable ---------------------------------------------------

    def parse_transaction(self, raw: RawTransaction, chain_id: int) -> ReadableTransaction:
        context = self._context(chain_id)
        for codec in self._codecs:
            parsed = codec.parse(raw, context)
            if parsed is not None:
                logger.debug("Parsed transaction to %s as %s", raw.target, codec.type.value)
                return parsed
        raise UnrecognizedTypeError(
            f"No codec recognizes the transaction to {raw.target} ({raw.signature!r})."
        )

    def parse_transactions(
        self, raws: Iterable[RawTransaction], chain_id: int
    ) -> Tuple[ReadableTransaction, ...]:
        return tuple(self.parse_transaction(raw, chain_id) for raw in raws)

    def unparse_transaction(
        self, transaction: ReadableTransaction, chain_id: int
    ) -> RawTransaction:
        codec = self.codec_for(getattr(transaction, "type", None))
        return codec.unparse(transaction, self._context(chain_id))

    def unparse_transactions(
        self, transactions: Iterable[ReadableTransaction], chain_id: int
    ) -> Tuple[RawTransaction, ...]:
        return tuple(self.unparse_transaction(t, chain_id) for t in transactions)

    # -- readable <-> actions -----------------------------------------------

    def build_actions(self, transactions: Iterable[ReadableTransaction]) -> Tuple[Action, ...]:
        """Greedily recover actions, restarting from the first handler after each match.

        Whatever no handler claims is returned as one trailing custom transaction.
        """

        remaining = tuple(transactions)
        actions = []
        while remaining:
            result = None
            for handler in self._handlers:
                if handler.build is None:
                    continue
                result = handler.build(remaining)
                if result is not None:
                    logger.debug(
                        "Handler %s matched; %d transactions remain",
                        handler.type.value,
                        len(result.remaining_transactions),
                    )
                    break
            if result is None:
                break
            actions.append(result.action)
            remaining = result.remaining_transactions

        if remaining:
            logger.info(
                "Wrapping %d unrecognized transactions as a custom transaction",
                len(remaining),
            )
            actions.append(CustomTransactionAction(transactions=remaining))
        return tuple(actions)

    def resolve_action(self, action: Action) -> Tuple[ReadableTransaction, ...]:
        handler = self.handler_for(getattr(action, "type", None))
        return tuple(handler.resolve(action))

    def resolve_actions(self, actions: Iterable[Action]) -> Tuple[ReadableTransaction, ...]:
        transactions = []
        for action in actions:
            transactions.extend(self.resolve_action(action))
        return tuple(transactions)

    # -- end to end ---------------------------------------------------------

    def decompose(self, raws: Iterable[RawTransaction], chain_id: int) -> Tuple[Action, ...]:
        transactions = self.parse_transactions(raws, chain_id)
        actions = self.build_actions(transactions)
        logger.debug(
            "Decomposed %d transactions into %d actions on chain %d",
            len(transactions),
            len(actions),
            chain_id,
        )
        return actions

    def encode_actions(
        self, actions: Iterable[Action], chain_id: int
    ) -> Tuple[RawTransaction, ...]:
        return self.unparse_transactions(self.resolve_actions(actions), chain_id)

    def _context(self, chain_id: int) -> CodecContext:
        return CodecContext(chain_id=chain_id, registry=self._registry)


def _index_by_type(entries: Tuple, kind: str) -> Dict:
    index: Dict = {}
    for entry in entries:
        if entry.type in index:
            raise ValueError(f"Duplicate {kind} registered for {entry.type.value}.")
        index[entry.type] = entry
    return index
