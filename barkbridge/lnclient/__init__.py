"""Lightning node client backed by the Bark ledger service.

Exposes :class:`BarkService`, which satisfies the :class:`LNClient` protocol by
translating node operations into Bark REST calls.
"""

from .application.bark_service import BarkService, create_bark_service
from .domain.protocol import LNClient

__all__ = ["BarkService", "LNClient", "create_bark_service"]
