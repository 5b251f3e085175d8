"""
HTTP transport for the Cercalia API.

Built on httpx with:
- API key signing of every request
- Exponential backoff retry of transient failures (see retry.with_retry)
- Root wrapper and error node checks on every response
- An asyncio variant that runs the blocking call in a worker thread
"""

import asyncio
import json
import threading
from typing import TYPE_CHECKING, Any, Mapping, Optional

import httpx
import structlog

from .errors import CercaliaError, ErrorKind
from .normalizer import NodeKind, get_attr, get_child, get_value, node_kind
from .retry import with_retry

if TYPE_CHECKING:
    from cercalia_client.config.settings import CercaliaConfig

ROOT_KEY = "cercalia"
ERROR_KEY = "error"
API_KEY_PARAM = "key"
BODY_SNIPPET_LIMIT = 500


def truncate(text: str, limit: int = BODY_SNIPPET_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def unwrap_response(document: Any, operation: str) -> dict:
    """
    Return the root wrapper of a decoded response.

    Args:
        document: Decoded JSON body
        operation: Operation label for error messages

    Returns:
        The "cercalia" node

    Raises:
        CercaliaError: STRUCTURAL if the wrapper is missing,
            DOMAIN if it holds an error node
    """
    root = get_child(document, ROOT_KEY)
    kind = node_kind(root)
    if kind is NodeKind.NULL:
        raise CercaliaError.structural(
            f"Invalid response format: missing '{ROOT_KEY}' root property",
            operation=operation,
        )
    if kind is not NodeKind.OBJECT:
        raise CercaliaError.structural(
            f"Invalid response format: '{ROOT_KEY}' root property is not an object "
            f"(got {kind.value})",
            operation=operation,
        )

    error_node = root.get(ERROR_KEY)
    if error_node is not None:
        code = get_attr(error_node, "id")
        message = get_value(error_node)
        raise CercaliaError.domain(
            f"Cercalia error [{code}]: {message}",
            code=code,
            operation=operation,
        )

    return root


class CercaliaClient:
    """
    Cercalia API client.

    Every service call goes through request(): the parameters are signed
    with the API key, sent as a GET, retried on transient failures, and
    the "cercalia" root node of the response is returned.

    Usage:
        with CercaliaClient(CercaliaConfig(api_key="...")) as client:
            params = client.new_params("cand")
            client.add_if_present(params, "ctn", "Barcelona")
            node = client.request(params, "Geocoding")
    """

    def __init__(
        self,
        config: "CercaliaConfig",
        http_client: Optional[httpx.Client] = None,
        logger=None,
    ):
        """
        Initialize client.

        Args:
            config: Client settings
            http_client: Shared httpx client (creates own if not provided)
            logger: structlog logger (defaults to the module logger)
        """
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=httpx.Timeout(config.timeout),
            headers={"Accept": "application/json"},
        )
        self.logger = logger or structlog.get_logger(__name__)

    def __enter__(self) -> "CercaliaClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            self._client.close()

    # ========== Parameter helpers ==========

    @staticmethod
    def new_params(cmd: Optional[str] = None) -> dict[str, str]:
        """Start a parameter map, optionally seeded with the "cmd" parameter."""
        return {"cmd": cmd} if cmd else {}

    @staticmethod
    def add_if_present(params: dict[str, str], key: str, value: Any) -> None:
        """Add `value` as text unless it is None or a blank string."""
        if value is None:
            return
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
            return
        text = str(value)
        if not text.strip():
            return
        params[key] = text

    @staticmethod
    def add_if_true(
        params: dict[str, str],
        key: str,
        flag: Optional[bool],
        true_value: str,
    ) -> None:
        if flag is True:
            params[key] = true_value

    # ========== Request pipeline ==========

    def build_url(
        self,
        params: Mapping[str, str],
        base_url: Optional[str] = None,
    ) -> httpx.URL:
        """Compose the signed request URL: API key first, then `params`."""
        effective = base_url or self.config.base_url
        query = [(API_KEY_PARAM, self.config.api_key)]
        for key, value in params.items():
            if value is None:
                raise ValueError(f"Parameter '{key}' is None; omit absent values")
            query.append((key, value))
        return httpx.URL(effective).copy_merge_params(query)

    def request(
        self,
        params: Mapping[str, str],
        operation: str,
        base_url: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> dict:
        """
        Execute one Cercalia operation.

        Args:
            params: Query parameters (without the API key)
            operation: Label used in logs and error messages
            base_url: Endpoint override for this call
            cancel_event: Setting this event aborts pending retries

        Returns:
            The "cercalia" root node

        Raises:
            CercaliaError: DOMAIN / STRUCTURAL on first occurrence,
                TRANSIENT once retries are exhausted
        """
        url = self.build_url(params, base_url)

        try:
            return with_retry(
                lambda: self._execute(url, operation),
                self.config.retry_policy,
                operation=operation,
                logger=self.logger,
                cancel_event=cancel_event,
            )
        except CercaliaError as e:
            if e.kind is not ErrorKind.TRANSIENT:
                raise
            self.logger.error("request_failed", operation=operation, error=e.message)
            raise CercaliaError.transient(
                f"Request failed: {e.message}", operation=operation
            ) from e
        except Exception as e:
            self.logger.error("request_failed", operation=operation, error=str(e))
            raise CercaliaError.transient(
                f"Request failed: {e}", operation=operation
            ) from e

    async def request_async(
        self,
        params: Mapping[str, str],
        operation: str,
        base_url: Optional[str] = None,
    ) -> dict:
        """
        Run request() in a worker thread.

        Cancelling the awaiting task stops further retry attempts.
        """
        cancel_event = threading.Event()
        try:
            return await asyncio.to_thread(
                self.request,
                params,
                operation,
                base_url,
                cancel_event=cancel_event,
            )
        except asyncio.CancelledError:
            cancel_event.set()
            raise

    def _execute(self, url: httpx.URL, operation: str) -> dict:
        """Single attempt: GET, decode, unwrap."""
        if self.config.debug:
            masked = url.copy_set_param(API_KEY_PARAM, "***")
            self.logger.debug("request_url", operation=operation, url=str(masked))

        response = self._client.get(url)
        raw = response.text

        if not response.is_success:
            self.logger.error(
                "http_error",
                operation=operation,
                status=response.status_code,
                body=truncate(raw),
            )
            raise CercaliaError.transient(
                f"Cercalia API error: {response.status_code} "
                f"{response.reason_phrase}: {truncate(raw)}",
                operation=operation,
            )

        if self.config.debug:
            self.logger.debug("response_body", operation=operation, body=truncate(raw))

        try:
            document = json.loads(raw)
        except ValueError as e:
            self.logger.error("invalid_json_response", operation=operation, body=truncate(raw))
            raise CercaliaError.transient(
                f"Invalid JSON response from Cercalia API: {truncate(raw, 200)}",
                operation=operation,
            ) from e

        return unwrap_response(document, operation)
