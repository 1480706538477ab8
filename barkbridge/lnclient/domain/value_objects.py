"""Canonical value objects exchanged with the node orchestrator.

Value Objects:
- Immutable (frozen dataclasses)
- No identity (equality based on attributes)
- Amounts are always millisatoshis
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any

from .enums import TransactionType

_PUBKEY_RE = re.compile(r"^[0-9a-f]{66}$")


@dataclass(frozen=True)
class Transaction:
    """Lightning transaction in the orchestrator's canonical shape.

    ``settled_at`` is only set once the payment is final. Timestamps are unix
    epoch seconds.
    """

    type: TransactionType
    invoice: str = ""
    description: str = ""
    description_hash: str = ""
    preimage: str = ""
    payment_hash: str = ""
    amount_msat: int = 0
    fees_paid_msat: int = 0
    created_at: int = 0
    settled_at: int | None = None
    expires_at: int | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        # Accept plain strings from callers, store the enum
        object.__setattr__(self, "type", TransactionType(self.type))

    @property
    def is_settled(self) -> bool:
        """Whether the transaction reached its final state."""
        return self.settled_at is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass(frozen=True)
class PayInvoiceResponse:
    """Result of a successful outgoing payment."""

    preimage: str
    fee_msat: int = 0


@dataclass(frozen=True)
class PayKeysendResponse:
    """Result of a keysend payment."""

    fee_msat: int = 0


@dataclass(frozen=True)
class NodeInfo:
    """Lightning node identity."""

    alias: str
    color: str
    pubkey: str
    network: str
    block_height: int = 0
    block_hash: str = ""

    def __post_init__(self) -> None:
        """Validate node info constraints."""
        if not _PUBKEY_RE.match(self.pubkey):
            raise ValueError(f"Invalid pubkey format: {self.pubkey}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class NodeConnectionInfo:
    """Where peers can reach the node."""

    pubkey: str
    address: str
    port: int

    def __post_init__(self) -> None:
        """Validate connection info constraints."""
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}")

    @property
    def uri(self) -> str:
        """Node URI in ``pubkey@host:port`` form."""
        return f"{self.pubkey}@{self.address}:{self.port}"


@dataclass(frozen=True)
class NodeStatus:
    """Readiness of the backing node."""

    is_ready: bool
    internal_node_status: Any = None


@dataclass(frozen=True)
class Channel:
    """Lightning channel summary."""

    id: str
    remote_pubkey: str
    local_balance_msat: int
    remote_balance_msat: int
    active: bool
    public: bool
    funding_tx_id: str = ""


@dataclass(frozen=True)
class OnchainBalance:
    """On-chain wallet balance (millisatoshis)."""

    spendable_msat: int
    total_msat: int
    reserved_msat: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class LightningBalance:
    """Off-chain spending and receiving capacity (millisatoshis)."""

    total_spendable_msat: int
    total_receivable_msat: int
    next_max_spendable_msat: int
    next_max_receivable_msat: int
    next_max_spendable_mpp_msat: int
    next_max_receivable_mpp_msat: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class Balances:
    """Combined on-chain and Lightning balance snapshot."""

    onchain: OnchainBalance
    lightning: LightningBalance

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"onchain": self.onchain.to_dict(), "lightning": self.lightning.to_dict()}


@dataclass(frozen=True)
class OnchainTransaction:
    """On-chain wallet transaction."""

    txid: str
    amount_sat: int
    created_at: int
    state: str
    num_confirmations: int = 0


@dataclass(frozen=True)
class PeerDetails:
    """Connected peer."""

    node_id: str
    address: str
    is_persisted: bool = False
    is_connected: bool = False


@dataclass(frozen=True)
class TLVRecord:
    """Custom TLV record attached to a keysend payment."""

    type: int
    value: str


@dataclass(frozen=True)
class ConnectPeerRequest:
    pubkey: str
    address: str
    port: int


@dataclass(frozen=True)
class OpenChannelRequest:
    pubkey: str
    amount_sat: int
    public: bool = False


@dataclass(frozen=True)
class OpenChannelResponse:
    funding_tx_id: str


@dataclass(frozen=True)
class CloseChannelRequest:
    channel_id: str
    node_id: str
    force: bool = False


@dataclass(frozen=True)
class CloseChannelResponse:
    pass


@dataclass(frozen=True)
class UpdateChannelRequest:
    channel_id: str
    node_id: str
    forwarding_fee_base_msat: int
    max_dust_htlc_exposure_from_fee_rate_multiplier: int


@dataclass(frozen=True)
class CustomNodeCommandArgDef:
    name: str
    description: str


@dataclass(frozen=True)
class CustomNodeCommandDef:
    """A node-specific command the client advertises."""

    name: str
    description: str
    args: list[CustomNodeCommandArgDef] = field(default_factory=list)


@dataclass(frozen=True)
class CustomNodeCommandRequest:
    name: str
    args: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CustomNodeCommandResponse:
    response: Any
