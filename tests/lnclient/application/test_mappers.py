"""Tests for the ledger record to canonical type conversions."""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from barkbridge.lnclient.application.mappers import (
    MSAT_PER_SAT,
    movement_to_transaction,
    movements_to_transactions,
    msat_to_sat,
    parse_optional_timestamp,
    parse_timestamp,
    sat_to_msat,
    to_balances,
    to_onchain_balance,
)
from barkbridge.lnclient.domain.enums import TransactionType
from barkbridge.lnclient.infrastructure.bark_models import (
    Movement,
    OnchainBalanceRecord,
    WalletBalance,
)

CREATED_AT = "2025-03-01T10:00:00Z"
CREATED_AT_UNIX = int(datetime(2025, 3, 1, 10, 0, tzinfo=UTC).timestamp())
COMPLETED_AT = "2025-03-01T10:05:00+00:00"
COMPLETED_AT_UNIX = CREATED_AT_UNIX + 300


class TestUnitConversion:
    def test_factor(self):
        assert MSAT_PER_SAT == 1000
        assert sat_to_msat(21) == 21_000

    @pytest.mark.parametrize(
        ("amount_msat", "expected_sat"),
        [(0, 0), (999, 0), (1_000, 1), (1_999, 1), (2_000, 2)],
    )
    def test_msat_to_sat_truncates(self, amount_msat, expected_sat):
        assert msat_to_sat(amount_msat) == expected_sat

    @given(st.integers(min_value=0, max_value=21_000_000 * 100_000_000 * MSAT_PER_SAT))
    def test_truncation_loses_less_than_one_sat(self, amount_msat):
        restored = sat_to_msat(msat_to_sat(amount_msat))
        assert restored <= amount_msat < restored + MSAT_PER_SAT


class TestParseTimestamp:
    def test_utc_designator(self):
        assert parse_timestamp(CREATED_AT) == CREATED_AT_UNIX

    def test_offset(self):
        assert parse_timestamp("2025-03-01T12:00:00+02:00") == CREATED_AT_UNIX

    def test_nanosecond_fraction(self):
        assert parse_timestamp("2025-03-01T10:00:00.123456789Z") == CREATED_AT_UNIX

    def test_lowercase_designators_and_short_fraction(self):
        assert parse_timestamp("2025-03-01t10:00:00.5z") == CREATED_AT_UNIX

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "yesterday",
            "2025-03-01",
            "2025-03-01 10:00:00Z",
            "2025-03-01T10:00:00",
            "2025-03-01T10:00+00:00",
            "2025-03-01T10Z",
            "2025-W09-6T10:00:00Z",
            "20250301T100000Z",
            "2025-03-01T10:00:00Z\n",
            "2025-13-01T10:00:00Z",
        ],
    )
    def test_rejects_non_rfc3339(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)

    def test_optional_missing_or_malformed_is_none(self):
        assert parse_optional_timestamp(None) is None
        assert parse_optional_timestamp("garbage") is None
        assert parse_optional_timestamp(COMPLETED_AT) == COMPLETED_AT_UNIX


class TestMovementToTransaction:
    """Classification and conversion of a single movement."""

    def test_receive_movement(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(
                kind="receive",
                status="pending",
                received_on=[{"destination": "lnbc1...", "amount_sat": 500}],
                offchain_fee_sat=2,
            )
        )

        tx = movement_to_transaction(movement)

        assert tx is not None
        assert tx.type == TransactionType.INCOMING
        assert tx.invoice == "lnbc1..."
        assert tx.amount_msat == 500_000
        assert tx.fees_paid_msat == 2_000
        assert tx.created_at == CREATED_AT_UNIX
        assert tx.settled_at is None

    def test_send_movement_uses_sent_to(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(
                kind="send",
                received_on=[{"destination": "ignored", "amount_sat": 1}],
                sent_to=[{"destination": "lnbc2...", "amount_sat": 700}],
            )
        )

        tx = movement_to_transaction(movement)

        assert tx.type == TransactionType.OUTGOING
        assert tx.invoice == "lnbc2..."
        assert tx.amount_msat == 700_000

    def test_only_first_destination_is_used(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(
                kind="send",
                sent_to=[
                    {"destination": "first", "amount_sat": 10},
                    {"destination": "second", "amount_sat": 20},
                ],
            )
        )

        tx = movement_to_transaction(movement)

        assert tx.invoice == "first"
        assert tx.amount_msat == 10_000

    def test_missing_destination_defaults_to_zero_amount(self, movement_factory):
        movement = Movement.model_validate(movement_factory(kind="receive", received_on=[]))

        tx = movement_to_transaction(movement)

        assert tx.invoice == ""
        assert tx.amount_msat == 0

    def test_finished_movement_is_settled(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(status="finished", completed_at=COMPLETED_AT)
        )

        assert movement_to_transaction(movement).settled_at == COMPLETED_AT_UNIX

    def test_completed_at_ignored_unless_finished(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(status="pending", completed_at=COMPLETED_AT)
        )

        assert movement_to_transaction(movement).settled_at is None

    @pytest.mark.parametrize("kind", ["swap", "board", "round", "exit", ""])
    def test_other_kinds_are_dropped(self, movement_factory, kind):
        movement = Movement.model_validate(movement_factory(kind=kind))

        assert movement_to_transaction(movement) is None


class TestMovementRecoveryPolicies:
    """Drop versus absent: the two local recovery policies."""

    def test_unparsable_created_at_drops_the_record(self, movement_factory):
        movement = Movement.model_validate(movement_factory(created_at="not-a-time"))

        assert movement_to_transaction(movement) is None

    def test_missing_time_block_drops_the_record(self):
        movement = Movement.model_validate({"id": 9, "subsystem": {"kind": "receive"}})

        assert movement_to_transaction(movement) is None

    def test_null_created_at_drops_the_record(self, movement_factory):
        payload = movement_factory()
        payload["time"]["created_at"] = None

        movement = Movement.model_validate(payload)

        assert movement.time.created_at == ""
        assert movement_to_transaction(movement) is None

    def test_null_optional_timestamp_stays_absent(self, movement_factory):
        movement = Movement.model_validate(movement_factory(status="finished", completed_at=None))

        assert movement.time.completed_at is None
        assert movement_to_transaction(movement).settled_at is None

    def test_unparsable_completed_at_keeps_the_record(self, movement_factory):
        movement = Movement.model_validate(
            movement_factory(status="finished", completed_at="not-a-time")
        )

        tx = movement_to_transaction(movement)

        assert tx is not None
        assert tx.settled_at is None
        assert tx.created_at == CREATED_AT_UNIX

    def test_pipeline_applies_both_policies(self, movement_factory):
        movements = [
            Movement.model_validate(m)
            for m in [
                movement_factory(movement_id=1, created_at="broken"),
                movement_factory(movement_id=2, status="finished", completed_at="broken"),
                movement_factory(movement_id=3, kind="swap"),
                movement_factory(
                    movement_id=4,
                    kind="send",
                    status="finished",
                    completed_at=COMPLETED_AT,
                    sent_to=[{"destination": "lnbc4", "amount_sat": 4}],
                ),
            ]
        ]

        txs = list(movements_to_transactions(movements))

        assert len(txs) == 2
        assert txs[0].type == TransactionType.INCOMING
        assert txs[0].settled_at is None
        assert txs[1].invoice == "lnbc4"
        assert txs[1].settled_at == COMPLETED_AT_UNIX


class TestBalanceConversion:
    def test_onchain_balance(self, onchain_balance_payload):
        balance = to_onchain_balance(OnchainBalanceRecord.model_validate(onchain_balance_payload))

        assert balance.spendable_msat == 80_000_000
        assert balance.total_msat == 90_000_000
        assert balance.reserved_msat == 5_000_000

    def test_balances_report_zero_receivable(self, wallet_balance_payload, onchain_balance_payload):
        balances = to_balances(
            WalletBalance.model_validate(wallet_balance_payload),
            OnchainBalanceRecord.model_validate(onchain_balance_payload),
        )

        lightning = balances.lightning
        assert lightning.total_spendable_msat == 150_000_000
        assert lightning.next_max_spendable_msat == 150_000_000
        assert lightning.next_max_spendable_mpp_msat == 150_000_000
        assert lightning.total_receivable_msat == 0
        assert lightning.next_max_receivable_msat == 0
        assert lightning.next_max_receivable_mpp_msat == 0
        assert balances.onchain.total_msat == 90_000_000
