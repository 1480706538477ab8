"""Domain enums for the node client adapter."""

from enum import Enum


class TransactionType(str, Enum):
    """Direction of a canonical transaction."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"

    def __str__(self) -> str:
        return self.value


class MovementKind(str, Enum):
    """Subsystem kinds of a ledger movement that map to a transaction.

    Any other kind (boards, rounds, exits, swaps...) has no transaction
    counterpart.
    """

    RECEIVE = "receive"
    SEND = "send"

    def __str__(self) -> str:
        return self.value

    @property
    def transaction_type(self) -> TransactionType:
        """Canonical direction for this kind of movement."""
        if self is MovementKind.RECEIVE:
            return TransactionType.INCOMING
        return TransactionType.OUTGOING


class MovementStatus(str, Enum):
    """Ledger movement status.

    Only ``finished`` is meaningful to the adapter; every other value is an
    in-progress state.
    """

    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


class Nip47Method(str, Enum):
    """NIP-47 wallet methods the adapter can back."""

    PAY_INVOICE = "pay_invoice"
    MAKE_INVOICE = "make_invoice"
    GET_BALANCE = "get_balance"
    LIST_TRANSACTIONS = "list_transactions"
    LOOKUP_INVOICE = "lookup_invoice"

    def __str__(self) -> str:
        return self.value
