"""Node client interface expected by the wallet orchestrator.

The orchestrator talks to every Lightning backend through this protocol.
Backends conform structurally; an operation a backend cannot serve raises
:class:`~barkbridge.exceptions.NotSupportedError` instead of being left out.
"""

from typing import Protocol, runtime_checkable

from .value_objects import (
    Balances,
    Channel,
    CloseChannelRequest,
    CloseChannelResponse,
    ConnectPeerRequest,
    CustomNodeCommandDef,
    CustomNodeCommandRequest,
    CustomNodeCommandResponse,
    NodeConnectionInfo,
    NodeInfo,
    NodeStatus,
    OnchainBalance,
    OnchainTransaction,
    OpenChannelRequest,
    OpenChannelResponse,
    PayInvoiceResponse,
    PayKeysendResponse,
    PeerDetails,
    TLVRecord,
    Transaction,
    UpdateChannelRequest,
)


@runtime_checkable
class LNClient(Protocol):
    """Capability interface of a Lightning node client."""

    # Payments and invoices
    async def send_payment_sync(
        self, payment_request: str, amount_sat: int | None = None
    ) -> PayInvoiceResponse: ...

    async def send_keysend(
        self,
        amount_msat: int,
        destination: str,
        custom_records: list[TLVRecord],
        preimage: str,
    ) -> PayKeysendResponse: ...

    async def make_invoice(
        self,
        amount_msat: int,
        description: str,
        description_hash: str = "",
        expiry: int = 0,
        through_node_pubkey: str | None = None,
    ) -> Transaction: ...

    async def make_hold_invoice(
        self,
        amount_msat: int,
        description: str,
        description_hash: str,
        expiry: int,
        payment_hash: str,
    ) -> Transaction: ...

    async def settle_hold_invoice(self, preimage: str) -> None: ...

    async def cancel_hold_invoice(self, payment_hash: str) -> None: ...

    async def lookup_invoice(self, payment_hash: str) -> Transaction: ...

    async def list_transactions(
        self,
        from_: int = 0,
        until: int = 0,
        limit: int = 0,
        offset: int = 0,
        unpaid: bool = False,
        invoice_type: str = "",
    ) -> list[Transaction]: ...

    async def make_offer(self, description: str) -> str: ...

    # Node metadata
    def get_pubkey(self) -> str: ...

    async def get_info(self) -> NodeInfo: ...

    async def get_node_connection_info(self) -> NodeConnectionInfo: ...

    async def get_node_status(self) -> NodeStatus: ...

    def get_storage_dir(self) -> str: ...

    async def get_log_output(self, max_len: int) -> bytes: ...

    async def sign_message(self, message: str) -> str: ...

    async def get_network_graph(self, node_ids: list[str]) -> object: ...

    # Balances and on-chain wallet
    async def get_balances(self, include_inactive_channels: bool = False) -> Balances: ...

    async def get_onchain_balance(self) -> OnchainBalance: ...

    async def list_onchain_transactions(self) -> list[OnchainTransaction]: ...

    async def get_new_onchain_address(self) -> str: ...

    async def redeem_onchain_funds(
        self, to_address: str, amount_sat: int, fee_rate: int | None, send_all: bool
    ) -> str: ...

    # Channels and peers
    async def list_channels(self) -> list[Channel]: ...

    async def open_channel(self, request: OpenChannelRequest) -> OpenChannelResponse: ...

    async def close_channel(self, request: CloseChannelRequest) -> CloseChannelResponse: ...

    async def update_channel(self, request: UpdateChannelRequest) -> None: ...

    async def connect_peer(self, request: ConnectPeerRequest) -> None: ...

    async def disconnect_peer(self, peer_id: str) -> None: ...

    async def list_peers(self) -> list[PeerDetails]: ...

    # Routing
    def reset_router(self, key: str) -> None: ...

    async def send_payment_probes(self, invoice: str) -> None: ...

    async def send_spontaneous_payment_probes(self, amount_msat: int, node_id: str) -> None: ...

    # Lifecycle and capabilities
    def shutdown(self) -> None: ...

    def update_last_wallet_sync_request(self) -> None: ...

    def get_supported_nip47_methods(self) -> list[str]: ...

    def get_supported_nip47_notification_types(self) -> list[str]: ...

    def get_custom_node_command_definitions(self) -> list[CustomNodeCommandDef]: ...

    async def execute_custom_node_command(
        self, command: CustomNodeCommandRequest
    ) -> CustomNodeCommandResponse: ...
