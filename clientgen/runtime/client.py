"""Network client used by generated client groups.

One shared client per process. The HTTP transport is built lazily, at most
once, on first use. Every request resolves to a tagged outcome:
``Success(value)``, ``Failure(error)`` or ``Unauthorized()``. A 401 answer
never surfaces as a ``Failure``; observers of ``NOT_AUTHORIZED`` on the
notification channel are told instead.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import random
import ssl
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, ClassVar, Mapping, Optional

import httpx

from .. import __version__
from .codec import decode, encode
from .errors import (
    ApiError,
    DecodingError,
    EmptyPayloadError,
    Failure,
    HTTPStatusError,
    MockError,
    NotAStringError,
    Outcome,
    RequestCancelledError,
    Success,
    TransportError,
    Unauthorized,
)
from .notifications import NOT_AUTHORIZED, NotificationCenter, default_center

logger = logging.getLogger(__name__)

# Mock payload that turns into a MockError instead of a decoded value.
MOCK_FAILURE = "400"

CERT_SUFFIXES = (".cer", ".crt", ".pem")


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the shared client."""

    base_url: str = ""
    api_root: str = "api"
    access_token: Optional[str] = None
    token_provider: Optional[Callable[[], Optional[str]]] = None
    cert_dir: Optional[Path] = None
    timeout: float = 30.0
    mocks_enabled: bool = False
    mock_delay: tuple[float, float] = (0.5, 3.0)
    user_agent: str = f"clientgen/{__version__}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """Read CLIENTGEN_BASE_URL, CLIENTGEN_API_ROOT, CLIENTGEN_TOKEN,
        CLIENTGEN_CERT_DIR and CLIENTGEN_MOCKS."""
        env = os.environ if environ is None else environ
        cert_dir = env.get("CLIENTGEN_CERT_DIR")
        return cls(
            base_url=env.get("CLIENTGEN_BASE_URL", ""),
            api_root=env.get("CLIENTGEN_API_ROOT", "api"),
            access_token=env.get("CLIENTGEN_TOKEN"),
            cert_dir=Path(cert_dir) if cert_dir else None,
            mocks_enabled=_env_flag(env.get("CLIENTGEN_MOCKS")),
        )

    @property
    def url_host(self) -> str:
        parts = [self.base_url.rstrip("/")]
        if self.api_root:
            parts.append(self.api_root.strip("/"))
        return "/".join(parts)

    def token(self) -> str:
        if self.token_provider is not None:
            return self.token_provider() or ""
        return self.access_token or ""


def pinned_ssl_context(cert_dir: Path) -> ssl.SSLContext:
    """SSL context trusting only the certificates found in cert_dir."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    certificates = sorted(
        p for p in Path(cert_dir).iterdir() if p.suffix.lower() in CERT_SUFFIXES
    )
    if not certificates:
        raise ValueError(f"No certificates found in {cert_dir}")
    for path in certificates:
        data = path.read_bytes()
        if b"-----BEGIN" in data:
            context.load_verify_locations(cadata=data.decode("ascii"))
        else:
            context.load_verify_locations(cadata=data)
    return context


def parse_response(result_type: Any, content: bytes) -> Any:
    """Turn a response body into a value of result_type.

    ``bytes`` results are returned raw. ``str`` results must be a quoted
    payload; the enclosing quotes are dropped. Anything else is JSON.
    """
    if not content:
        raise EmptyPayloadError("response body is empty")
    if result_type is bytes:
        return content
    if result_type is str:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError:
            raise NotAStringError("response body is not UTF-8 text") from None
        if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
            raise NotAStringError(f"expected a quoted string, got {text[:40]!r}")
        return text[1:-1]
    try:
        data = json.loads(content)
    except ValueError as exc:
        raise DecodingError(f"response body is not JSON: {exc}") from exc
    return decode(result_type, data)


class ApiClient:
    """Async HTTP client shared by all generated client groups."""

    _shared: ClassVar[Optional[ApiClient]] = None
    _shared_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        notifications: NotificationCenter = default_center,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.notifications = notifications
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._configure_lock = threading.Lock()
        self._inflight: set[asyncio.Task] = set()
        self._aborted: set[asyncio.Task] = set()

    @classmethod
    def shared(cls) -> ApiClient:
        """The process-wide client, created on first use from the environment."""
        if cls._shared is None:
            with cls._shared_lock:
                if cls._shared is None:
                    cls._shared = cls()
        return cls._shared

    @classmethod
    def install(cls, client: Optional[ApiClient]) -> None:
        """Replace the process-wide client (None resets it)."""
        with cls._shared_lock:
            cls._shared = client

    @property
    def configured(self) -> bool:
        return self._http is not None

    def configure(self) -> httpx.AsyncClient:
        """Build the HTTP transport. Runs at most once per client."""
        if self._http is not None:
            return self._http
        with self._configure_lock:
            if self._http is None:
                verify: Any = True
                if self.config.cert_dir is not None:
                    verify = pinned_ssl_context(self.config.cert_dir)
                self._http = httpx.AsyncClient(
                    base_url=self.config.url_host,
                    timeout=self.config.timeout,
                    verify=verify,
                    transport=self._transport,
                )
                logger.debug("Configured HTTP transport for %s", self.config.url_host)
        return self._http

    def _default_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token()}",
            "User-Agent": self.config.user_agent,
        }

    async def request(
        self,
        path: str,
        method: str,
        body: Any = None,
        result_type: Any = Any,
        mock: Optional[str] = None,
    ) -> Outcome:
        """Send one request and resolve it to a tagged outcome."""
        self.configure()
        if mock is not None and self.config.mocks_enabled:
            return await self._apply_mock(mock, result_type)

        task = asyncio.ensure_future(self._perform(path, method, body, result_type))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        try:
            return await task
        except asyncio.CancelledError:
            if task in self._aborted:
                self._aborted.discard(task)
                return Failure(RequestCancelledError(f"{method} {path} was cancelled"))
            raise

    def cancel_all(self) -> int:
        """Abort every in-flight request. Returns how many were cancelled."""
        tasks = [task for task in self._inflight if not task.done()]
        for task in tasks:
            self._aborted.add(task)
            task.cancel()
        if tasks:
            logger.info("Cancelled %d in-flight requests", len(tasks))
        return len(tasks)

    async def _perform(self, path: str, method: str, body: Any, result_type: Any) -> Outcome:
        http = self.configure()
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = encode(body)

        try:
            response = await http.request(
                method.upper(), path, headers=self._default_headers(), **kwargs,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            error = TransportError(str(exc) or type(exc).__name__)
            error.__cause__ = exc
            return Failure(error)

        if response.status_code == 401:
            logger.info("%s %s answered 401", method, path)
            self.notifications.post(NOT_AUTHORIZED, response)
            return Unauthorized(response.status_code)
        if response.is_error:
            return Failure(HTTPStatusError(response.status_code, response.text))

        try:
            return Success(parse_response(result_type, response.content))
        except ApiError as exc:
            return Failure(exc)

    async def _apply_mock(self, mock: str, result_type: Any) -> Outcome:
        low, high = self.config.mock_delay
        await asyncio.sleep(random.uniform(low, high))
        if mock == MOCK_FAILURE:
            return Failure(MockError("mock payload requested a failure"))
        try:
            return Success(parse_response(result_type, mock.encode("utf-8")))
        except ApiError as exc:
            return Failure(exc)

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        self.configure()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
