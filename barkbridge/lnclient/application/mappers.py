"""Conversions from Bark ledger records to canonical node-client types.

Two recovery policies apply while mapping movements and kept separate:

* drop: a movement whose ``created_at`` cannot be parsed, or whose kind is
  neither ``receive`` nor ``send``, produces no transaction;
* absent: an unparsable settlement timestamp (``completed_at``,
  ``preimage_revealed_at``) leaves ``settled_at`` unset and keeps the record.
"""

import re
from collections.abc import Iterable, Iterator
from datetime import datetime

from barkbridge.utils.logging import get_logger

from ..domain.enums import MovementKind, MovementStatus
from ..domain.value_objects import Balances, LightningBalance, OnchainBalance, Transaction
from ..infrastructure.bark_models import (
    Movement,
    MovementDestination,
    OnchainBalanceRecord,
    WalletBalance,
)

logger = get_logger(__name__)

MSAT_PER_SAT = 1000

_RFC3339_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def sat_to_msat(amount_sat: int) -> int:
    """Convert whole satoshis to millisatoshis."""
    return amount_sat * MSAT_PER_SAT


def msat_to_sat(amount_msat: int) -> int:
    """Convert millisatoshis to whole satoshis, truncating the remainder.

    Anything below 1000 msat is lost; the ledger service only accepts whole sats.
    """
    return amount_msat // MSAT_PER_SAT


def parse_timestamp(value: str) -> int:
    """Parse an RFC 3339 timestamp into unix epoch seconds.

    Only the full ``YYYY-MM-DDTHH:MM:SS[.frac](Z|+HH:MM)`` form is accepted;
    shorter ISO 8601 variants (no seconds, week dates, basic format) are not.

    Raises:
        ValueError: If the value is not a full date-time with a UTC offset
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"Not an RFC 3339 date-time: {value!r}")
    date_time, fraction, offset = match.groups()
    # datetime only keeps microseconds
    micros = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if offset in ("Z", "z") else offset
    parsed = datetime.fromisoformat(f"{date_time[:10]}T{date_time[11:]}.{micros}{offset}")
    return int(parsed.timestamp())


def parse_optional_timestamp(value: str | None) -> int | None:
    """Parse a timestamp that may be missing or malformed; either yields None."""
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        logger.debug("timestamp_unparsable", value=value)
        return None


def movement_to_transaction(movement: Movement) -> Transaction | None:
    """Map one movement to a transaction, or None when it must be dropped."""
    try:
        created_at = parse_timestamp(movement.time.created_at)
    except ValueError:
        logger.debug(
            "movement_skipped",
            movement_id=movement.id,
            reason="invalid_created_at",
            created_at=movement.time.created_at,
        )
        return None

    try:
        kind = MovementKind(movement.subsystem.kind)
    except ValueError:
        logger.debug(
            "movement_skipped",
            movement_id=movement.id,
            reason="unsupported_kind",
            kind=movement.subsystem.kind,
        )
        return None

    settled_at = None
    if movement.status == MovementStatus.FINISHED:
        settled_at = parse_optional_timestamp(movement.time.completed_at)

    # Multi-destination movements are keyed to their first leg
    legs = movement.received_on if kind is MovementKind.RECEIVE else movement.sent_to
    first_leg = legs[0] if legs else MovementDestination()

    return Transaction(
        type=kind.transaction_type,
        invoice=first_leg.destination,
        amount_msat=sat_to_msat(first_leg.amount_sat),
        fees_paid_msat=sat_to_msat(movement.offchain_fee_sat),
        created_at=created_at,
        settled_at=settled_at,
    )


def movements_to_transactions(movements: Iterable[Movement]) -> Iterator[Transaction]:
    """Map movements in order, dropping the ones without a transaction."""
    for movement in movements:
        transaction = movement_to_transaction(movement)
        if transaction is not None:
            yield transaction


def to_onchain_balance(record: OnchainBalanceRecord) -> OnchainBalance:
    """Canonical on-chain balance from the ledger record."""
    return OnchainBalance(
        spendable_msat=sat_to_msat(record.trusted_spendable_sat),
        total_msat=sat_to_msat(record.total_sat),
        reserved_msat=sat_to_msat(record.immature_sat),
    )


def to_lightning_balance(wallet: WalletBalance) -> LightningBalance:
    """Canonical off-chain balance from the wallet record.

    The ledger service has no notion of receive capacity, so every receivable
    figure is zero.
    """
    spendable_msat = sat_to_msat(wallet.spendable_sat)
    return LightningBalance(
        total_spendable_msat=spendable_msat,
        total_receivable_msat=0,
        next_max_spendable_msat=spendable_msat,
        next_max_receivable_msat=0,
        next_max_spendable_mpp_msat=spendable_msat,
        next_max_receivable_mpp_msat=0,
    )


def to_balances(wallet: WalletBalance, onchain: OnchainBalanceRecord) -> Balances:
    return Balances(onchain=to_onchain_balance(onchain), lightning=to_lightning_balance(wallet))


__all__ = [
    "MSAT_PER_SAT",
    "msat_to_sat",
    "movement_to_transaction",
    "movements_to_transactions",
    "parse_optional_timestamp",
    "parse_timestamp",
    "sat_to_msat",
    "to_balances",
    "to_lightning_balance",
    "to_onchain_balance",
]
