"""Shared test fixtures for the Bark node client tests."""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from barkbridge.lnclient.application.bark_service import BarkService
from barkbridge.lnclient.infrastructure.transport import BarkTransport

BARK_ADDRESS = "http://bark.test:3000"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeLedgerService:
    """In-memory stand-in for the Bark REST API.

    Routes are registered per (method, path) and every request that reaches
    the fake is recorded, so tests can assert how many network calls were made.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add_json(self, method: str, path: str, payload: Any, status_code: int = 200) -> None:
        """Answer ``method path`` with a JSON body."""
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, json=payload)

    def add_text(self, method: str, path: str, text: str, status_code: int) -> None:
        """Answer ``method path`` with a raw text body."""
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, text=text)

    def add_error(self, method: str, path: str, error: Exception) -> None:
        """Fail ``method path`` at the transport level."""

        def _raise(request: httpx.Request) -> httpx.Response:
            raise error

        self.routes[(method, path)] = _raise

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")
        return handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        """Decoded body of the most recent request."""
        return json.loads(self.requests[-1].content)


@pytest.fixture
def ledger() -> FakeLedgerService:
    """Fixture providing an empty fake ledger service."""
    return FakeLedgerService()


@pytest_asyncio.fixture
async def transport(ledger: FakeLedgerService) -> AsyncGenerator[BarkTransport, None]:
    """Fixture providing a transport wired to the fake ledger service."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(ledger.handle))
    yield BarkTransport(address=BARK_ADDRESS, http_client=http_client)
    await http_client.aclose()


@pytest.fixture
def service(transport: BarkTransport) -> BarkService:
    """Fixture providing a Bark node client on the fake ledger service."""
    return BarkService(transport)


def make_movement(
    *,
    movement_id: int = 1,
    kind: str = "receive",
    status: str = "pending",
    created_at: str = "2025-03-01T10:00:00Z",
    completed_at: str | None = None,
    received_on: list[dict[str, Any]] | None = None,
    sent_to: list[dict[str, Any]] | None = None,
    offchain_fee_sat: int = 0,
) -> dict[str, Any]:
    """Build a movement record as returned by ``GET /api/v1/movements``."""
    return {
        "id": movement_id,
        "status": status,
        "subsystem": {"name": "bark.lightning", "kind": kind},
        "metadata": "",
        "intended_balance_sat": 0,
        "effective_balance_sat": 0,
        "offchain_fee_sat": offchain_fee_sat,
        "sent_to": sent_to or [],
        "received_on": received_on or [],
        "input_vtxos": [],
        "output_vtxos": [],
        "exited_vtxos": [],
        "time": {
            "created_at": created_at,
            "updated_at": created_at,
            "completed_at": completed_at,
        },
    }


WALLET_BALANCE = {
    "spendable_sat": 150_000,
    "pending_lightning_send_sat": 1_000,
    "pending_lightning_receive_sat": 2_000,
    "pending_in_round_sat": 3_000,
    "pending_board_sat": 4_000,
    "pending_exit_sat": None,
}

ONCHAIN_BALANCE = {
    "total_sat": 90_000,
    "trusted_spendable_sat": 80_000,
    "immature_sat": 5_000,
    "trusted_pending_sat": 2_500,
    "untrusted_pending_sat": 2_500,
    "confirmed_sat": 80_000,
}


@pytest.fixture
def movement_factory() -> Callable[..., dict[str, Any]]:
    """Fixture providing the movement record builder."""
    return make_movement


@pytest.fixture
def wallet_balance_payload() -> dict[str, Any]:
    return dict(WALLET_BALANCE)


@pytest.fixture
def onchain_balance_payload() -> dict[str, Any]:
    return dict(ONCHAIN_BALANCE)
