"""HTTP transport for the Bark ledger service.

One call to :meth:`BarkTransport.execute` is one HTTP round trip. Failures are
classified into exactly one of :class:`TransportError`, :class:`APIError` or
:class:`DecodeError` and raised once; nothing is retried here. A body that
cannot be serialized raises :class:`EncodeError` before any request is sent.
"""

import re
import time
from typing import Any, TypeVar, get_origin, overload

import httpx
from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from barkbridge.exceptions import (
    APIError,
    DecodeError,
    EncodeError,
    TransportError,
    wrap_exception,
)
from barkbridge.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_QUALIFIED_NAME_RE = re.compile(r"\b[\w.]+\.(\w+)")


def _type_name(result_type: Any) -> str:
    """Readable name of a decode target, keeping generic arguments (``list[Movement]``)."""
    if get_origin(result_type) is None and hasattr(result_type, "__name__"):
        return result_type.__name__
    return _QUALIFIED_NAME_RE.sub(r"\1", str(result_type))


class BarkTransport:
    """JSON-over-HTTP client for the ledger service REST API.

    The underlying ``httpx.AsyncClient`` is safe to share between concurrent
    calls. A client passed in by the caller is never closed by the transport.
    """

    def __init__(
        self,
        address: str,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            address: Base address of the ledger service (no trailing slash)
            http_client: Optional shared HTTP client for connection reuse
            timeout_seconds: Request timeout; None keeps the httpx default
        """
        self.address = address.rstrip("/")
        self._owns_client = http_client is None
        if http_client is not None:
            self._http_client = http_client
        elif timeout_seconds is not None:
            self._http_client = httpx.AsyncClient(timeout=timeout_seconds)
        else:
            self._http_client = httpx.AsyncClient()

    @overload
    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: None = None,
        params: dict[str, str] | None = None,
    ) -> None: ...

    @overload
    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        result_type: type[T],
        params: dict[str, str] | None = None,
    ) -> T: ...

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Perform one request and decode the response.

        Args:
            method: HTTP verb
            path: Route relative to the base address, e.g. ``/api/v1/movements``
            body: JSON-serializable payload (pydantic models are dumped without
                unset optional fields)
            result_type: Type to decode the response body into; None skips decoding
            params: Query string parameters

        Returns:
            The decoded result, or None when no result type was requested

        Raises:
            TransportError: The request never got an HTTP response
            APIError: The service answered with a non-2xx status
            DecodeError: The body is not valid JSON for ``result_type``
            EncodeError: ``body`` cannot be serialized to JSON
        """
        url = f"{self.address}{path}"
        headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not None:
            content = self._encode_body(body)
            headers["Content-Type"] = "application/json"

        logger.debug("bark_request_started", method=method, path=path)
        start_time = time.perf_counter()

        try:
            # Non-streaming request: the body is read in full and the
            # connection returned to the pool before this returns.
            response = await self._http_client.request(
                method, url, content=content, headers=headers, params=params
            )
        except (httpx.TransportError, httpx.InvalidURL) as e:
            logger.warning(
                "bark_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(
                f"request failed: {e}", method=method, url=url, original_error=e
            ) from e

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        if not response.is_success:
            logger.warning(
                "bark_api_error",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            raise APIError(
                f"API error (status {response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "bark_request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        if result_type is None:
            return None

        try:
            return TypeAdapter(result_type).validate_json(response.content)
        except ValidationError as e:
            logger.warning(
                "bark_decode_failed",
                method=method,
                path=path,
                error_count=e.error_count(),
            )
            raise wrap_exception(
                e,
                "failed to decode response",
                exception_class=DecodeError,
                expected_type=_type_name(result_type),
                path=path,
            ) from e

    @staticmethod
    def _encode_body(body: Any) -> bytes:
        try:
            if isinstance(body, BaseModel):
                return body.model_dump_json(exclude_none=True).encode()
            return TypeAdapter(type(body)).dump_json(body)
        except (PydanticSerializationError, PydanticSchemaGenerationError) as e:
            logger.warning("bark_encode_failed", body_type=type(body).__name__, error=str(e))
            raise wrap_exception(
                e,
                "failed to encode request",
                exception_class=EncodeError,
                body_type=type(body).__name__,
            ) from e

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "BarkTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
