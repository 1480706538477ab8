"""Lightning node client backed by the Bark ledger service.

:class:`BarkService` conforms to :class:`~barkbridge.lnclient.domain.protocol.LNClient`.
Payments, invoices, transaction history and balances are served by the ledger
service REST API; everything else raises :class:`NotSupportedError` without
touching the network.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from barkbridge.exceptions import (
    BarkBridgeError,
    NotSupportedError,
    UnknownCustomNodeCommandError,
)
from barkbridge.utils.config import Settings
from barkbridge.utils.logging import LogPerformance, get_logger

from ..domain.enums import Nip47Method, TransactionType
from ..domain.value_objects import (
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
from ..infrastructure.bark_models import (
    InvoiceInfo,
    LightningInvoiceRequest,
    LightningPayRequest,
    LightningPayResponse,
    LightningReceiveStatus,
    Movement,
    OnchainBalanceRecord,
    WalletBalance,
)
from ..infrastructure.transport import BarkTransport
from .mappers import (
    movements_to_transactions,
    msat_to_sat,
    parse_optional_timestamp,
    to_balances,
    to_onchain_balance,
)

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Ledger service routes
PAY_PATH = "/api/v1/lightning/pay"
INVOICE_PATH = "/api/v1/lightning/receive/invoice"
RECEIVE_STATUS_PATH = "/api/v1/lightning/receive/status"
MOVEMENTS_PATH = "/api/v1/movements"
WALLET_BALANCE_PATH = "/api/v1/wallet/balance"
ONCHAIN_BALANCE_PATH = "/api/v1/onchain/balance"

# The ledger service exposes no node identity yet. These placeholders stand in
# for it until it does; they are constants, not live node state.
NODE_PUBKEY = "0326e692c455dd554c709bbb470b0ca7e0bb04152f777d1445fd0bf3709a2833a3"
NODE_ALIAS = "allNice | torq.co | second.tech"
NODE_NETWORK = "mainnet"
NODE_ADDRESS = "57.129.59.146"
NODE_PORT = 9735

SUPPORTED_NIP47_METHODS: tuple[str, ...] = tuple(method.value for method in Nip47Method)
SUPPORTED_NIP47_NOTIFICATION_TYPES: tuple[str, ...] = ()


def not_supported(func: F) -> F:
    """Replace an operation with the shared not-supported signal.

    The wrapped body never runs, so no request is ever issued.
    """
    operation = func.__name__

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("operation_not_supported", operation=operation)
            raise NotSupportedError(operation)

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger.debug("operation_not_supported", operation=operation)
        raise NotSupportedError(operation)

    return wrapper  # type: ignore[return-value]


class BarkService:
    """Node client that translates node operations into Bark REST calls.

    Stateless: every call is an independent request/response and nothing is
    cached between calls, so one instance may serve concurrent callers.
    """

    def __init__(self, transport: BarkTransport):
        """Initialize the service.

        Args:
            transport: HTTP transport bound to the ledger service address
        """
        self.transport = transport

    # ------------------------------------------------------------------
    # Payments and invoices
    # ------------------------------------------------------------------

    async def send_payment_sync(
        self, payment_request: str, amount_sat: int | None = None
    ) -> PayInvoiceResponse:
        """Pay a BOLT-11 invoice, offer or lightning address.

        Args:
            payment_request: Destination understood by the ledger service
            amount_sat: Amount for zero-amount destinations

        Returns:
            Preimage of the payment. The fee is always 0: the ledger service
            does not report it.
        """
        request = LightningPayRequest(destination=payment_request, amount_sat=amount_sat)
        with LogPerformance("bark_pay", logger):
            response = await self.transport.execute(
                "POST", PAY_PATH, request, result_type=LightningPayResponse
            )
        logger.info("payment_sent", message=response.message)
        return PayInvoiceResponse(preimage=response.preimage, fee_msat=0)

    async def make_invoice(
        self,
        amount_msat: int,
        description: str,
        description_hash: str = "",
        expiry: int = 0,
        through_node_pubkey: str | None = None,
    ) -> Transaction:
        """Request a BOLT-11 invoice from the ledger service.

        The service works in whole sats, so the requested amount is truncated
        (1999 msat asks for 1 sat). The returned transaction still carries the
        caller's msat amount. ``description_hash``, ``expiry`` and
        ``through_node_pubkey`` are not forwarded.
        """
        request = LightningInvoiceRequest(amount_sat=msat_to_sat(amount_msat))
        response = await self.transport.execute(
            "POST", INVOICE_PATH, request, result_type=InvoiceInfo
        )
        logger.info(
            "invoice_created",
            amount_msat=amount_msat,
            amount_sat=request.amount_sat,
        )
        return Transaction(
            type=TransactionType.INCOMING,
            invoice=response.invoice,
            description=description,
            amount_msat=amount_msat,
        )

    async def lookup_invoice(self, payment_hash: str) -> Transaction:
        """Look up an incoming payment by hash.

        A malformed ``preimage_revealed_at`` leaves the transaction unsettled
        instead of failing the lookup.
        """
        try:
            status = await self.transport.execute(
                "GET",
                RECEIVE_STATUS_PATH,
                result_type=LightningReceiveStatus,
                params={"filter": payment_hash},
            )
        except BarkBridgeError as e:
            logger.warning("lookup_invoice_failed", payment_hash=payment_hash, error=str(e))
            raise

        return Transaction(
            type=TransactionType.INCOMING,
            invoice=status.invoice,
            preimage=status.payment_preimage,
            payment_hash=status.payment_hash,
            settled_at=parse_optional_timestamp(status.preimage_revealed_at),
        )

    async def list_transactions(
        self,
        from_: int = 0,
        until: int = 0,
        limit: int = 0,
        offset: int = 0,
        unpaid: bool = False,
        invoice_type: str = "",
    ) -> list[Transaction]:
        """List Lightning transactions from the ledger's movement history.

        The filter arguments are accepted for interface compatibility but are
        neither sent to the service nor applied locally: the full history is
        returned. Movements that are not Lightning sends or receives, or whose
        creation time cannot be parsed, are left out.
        """
        if from_ or until or limit or offset or unpaid or invoice_type:
            logger.debug(
                "list_transactions_filters_ignored",
                from_=from_,
                until=until,
                limit=limit,
                offset=offset,
                unpaid=unpaid,
                invoice_type=invoice_type,
            )

        try:
            movements = await self.transport.execute(
                "GET", MOVEMENTS_PATH, result_type=list[Movement]
            )
        except BarkBridgeError as e:
            logger.warning("list_movements_failed", error=str(e))
            raise

        transactions = list(movements_to_transactions(movements))
        logger.debug(
            "transactions_listed",
            movement_count=len(movements),
            transaction_count=len(transactions),
        )
        return transactions

    @not_supported
    async def send_keysend(
        self,
        amount_msat: int,
        destination: str,
        custom_records: list[TLVRecord],
        preimage: str,
    ) -> PayKeysendResponse: ...

    @not_supported
    async def make_hold_invoice(
        self,
        amount_msat: int,
        description: str,
        description_hash: str,
        expiry: int,
        payment_hash: str,
    ) -> Transaction: ...

    @not_supported
    async def settle_hold_invoice(self, preimage: str) -> None: ...

    @not_supported
    async def cancel_hold_invoice(self, payment_hash: str) -> None: ...

    @not_supported
    async def make_offer(self, description: str) -> str: ...

    # ------------------------------------------------------------------
    # Balances and on-chain wallet
    # ------------------------------------------------------------------

    async def get_balances(self, include_inactive_channels: bool = False) -> Balances:
        """Combined wallet and on-chain balances.

        Both records must be fetched; if either request fails the whole call
        fails.
        """
        try:
            wallet = await self.transport.execute(
                "GET", WALLET_BALANCE_PATH, result_type=WalletBalance
            )
        except BarkBridgeError as e:
            logger.warning("wallet_balance_failed", error=str(e))
            raise

        onchain = await self._fetch_onchain_balance()
        return to_balances(wallet, onchain)

    async def get_onchain_balance(self) -> OnchainBalance:
        return to_onchain_balance(await self._fetch_onchain_balance())

    async def _fetch_onchain_balance(self) -> OnchainBalanceRecord:
        try:
            return await self.transport.execute(
                "GET", ONCHAIN_BALANCE_PATH, result_type=OnchainBalanceRecord
            )
        except BarkBridgeError as e:
            logger.warning("onchain_balance_failed", error=str(e))
            raise

    @not_supported
    async def list_onchain_transactions(self) -> list[OnchainTransaction]: ...

    @not_supported
    async def get_new_onchain_address(self) -> str: ...

    @not_supported
    async def redeem_onchain_funds(
        self, to_address: str, amount_sat: int, fee_rate: int | None, send_all: bool
    ) -> str: ...

    # ------------------------------------------------------------------
    # Node metadata (static placeholders, no network call)
    # ------------------------------------------------------------------

    def get_pubkey(self) -> str:
        return NODE_PUBKEY

    async def get_info(self) -> NodeInfo:
        return NodeInfo(
            alias=NODE_ALIAS,
            color="",
            pubkey=NODE_PUBKEY,
            network=NODE_NETWORK,
            block_height=0,
            block_hash="",
        )

    async def get_node_connection_info(self) -> NodeConnectionInfo:
        return NodeConnectionInfo(pubkey=NODE_PUBKEY, address=NODE_ADDRESS, port=NODE_PORT)

    async def get_node_status(self) -> NodeStatus:
        return NodeStatus(is_ready=True, internal_node_status=None)

    async def list_channels(self) -> list[Channel]:
        return []

    @not_supported
    def get_storage_dir(self) -> str: ...

    @not_supported
    async def get_log_output(self, max_len: int) -> bytes: ...

    @not_supported
    async def sign_message(self, message: str) -> str: ...

    @not_supported
    async def get_network_graph(self, node_ids: list[str]) -> object: ...

    # ------------------------------------------------------------------
    # Channels, peers and routing
    # ------------------------------------------------------------------

    @not_supported
    async def open_channel(self, request: OpenChannelRequest) -> OpenChannelResponse: ...

    @not_supported
    async def close_channel(self, request: CloseChannelRequest) -> CloseChannelResponse: ...

    @not_supported
    async def update_channel(self, request: UpdateChannelRequest) -> None: ...

    @not_supported
    async def connect_peer(self, request: ConnectPeerRequest) -> None: ...

    @not_supported
    async def disconnect_peer(self, peer_id: str) -> None: ...

    @not_supported
    async def list_peers(self) -> list[PeerDetails]: ...

    @not_supported
    def reset_router(self, key: str) -> None: ...

    @not_supported
    async def send_payment_probes(self, invoice: str) -> None: ...

    @not_supported
    async def send_spontaneous_payment_probes(self, amount_msat: int, node_id: str) -> None: ...

    # ------------------------------------------------------------------
    # Lifecycle and capabilities
    # ------------------------------------------------------------------

    @not_supported
    def shutdown(self) -> None: ...

    def update_last_wallet_sync_request(self) -> None:
        """No-op: the ledger service syncs on its own."""

    def get_supported_nip47_methods(self) -> list[str]:
        return list(SUPPORTED_NIP47_METHODS)

    def get_supported_nip47_notification_types(self) -> list[str]:
        return list(SUPPORTED_NIP47_NOTIFICATION_TYPES)

    def get_custom_node_command_definitions(self) -> list[CustomNodeCommandDef]:
        return []

    async def execute_custom_node_command(
        self, command: CustomNodeCommandRequest
    ) -> CustomNodeCommandResponse:
        """No custom commands are defined, so every command is unknown."""
        raise UnknownCustomNodeCommandError(command.name)

    async def aclose(self) -> None:
        """Release the transport."""
        await self.transport.aclose()


def create_bark_service(settings: Settings) -> BarkService:
    """Factory function to create the Bark node client from settings."""
    transport = BarkTransport(
        address=settings.bark_address,
        timeout_seconds=settings.bark_timeout_seconds,
    )
    logger.info("bark_service_created", bark_address=settings.bark_address)
    return BarkService(transport)
