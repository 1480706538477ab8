"""Wire models of the Bark ledger service REST API.

All amounts on the wire are whole satoshis. Unknown fields are ignored and
missing ones fall back to zero values, so partially populated records still
decode; timestamp strings are kept raw and parsed by the mapping layer.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BarkModel(BaseModel):
    """Base for ledger service payloads.

    An explicit ``null`` is read like a missing key, so the field takes its
    zero value (or None for the optional timestamps) instead of failing the
    enclosing record.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# Lightning pay

class LightningPayRequest(BarkModel):
    destination: str
    amount_sat: int | None = None
    comment: str | None = None


class LightningPayResponse(BarkModel):
    message: str = ""
    preimage: str = ""


# Lightning receive

class LightningInvoiceRequest(BarkModel):
    amount_sat: int


class InvoiceInfo(BarkModel):
    invoice: str


class LightningReceiveStatus(BarkModel):
    payment_hash: str = ""
    payment_preimage: str = ""
    invoice: str = ""
    preimage_revealed_at: str | None = None


# Balances

class WalletBalance(BarkModel):
    spendable_sat: int = 0
    pending_lightning_send_sat: int = 0
    pending_lightning_receive_sat: int = 0
    pending_in_round_sat: int = 0
    pending_board_sat: int = 0
    pending_exit_sat: int | None = None


class OnchainBalanceRecord(BarkModel):
    total_sat: int = 0
    trusted_spendable_sat: int = 0
    immature_sat: int = 0
    trusted_pending_sat: int = 0
    untrusted_pending_sat: int = 0
    confirmed_sat: int = 0


# Movements

class MovementSubsystem(BarkModel):
    name: str = ""
    kind: str = ""


class MovementDestination(BarkModel):
    destination: str = ""
    amount_sat: int = 0


class MovementTime(BarkModel):
    created_at: str = ""
    updated_at: str = ""
    completed_at: str | None = None


class Movement(BarkModel):
    """A balance-affecting event recorded by the ledger service."""

    id: int = 0
    status: str = ""
    subsystem: MovementSubsystem = Field(default_factory=MovementSubsystem)
    metadata: Any = None
    intended_balance_sat: int = 0
    effective_balance_sat: int = 0
    offchain_fee_sat: int = 0
    sent_to: list[MovementDestination] = Field(default_factory=list)
    received_on: list[MovementDestination] = Field(default_factory=list)
    input_vtxos: list[str] = Field(default_factory=list)
    output_vtxos: list[str] = Field(default_factory=list)
    exited_vtxos: list[str] = Field(default_factory=list)
    time: MovementTime = Field(default_factory=MovementTime)
