"""aqua test-management client."""

import asyncio
import logging
from collections.abc import Mapping

import aiohttp

from boostsec.junit_importer.clients.base import ExecutionClient
from boostsec.junit_importer.errors import (
    AuthenticationError,
    ConfigurationError,
    TerminalSubmissionError,
    TransientSubmissionError,
)
from boostsec.junit_importer.models.config import AquaConfig, HttpConfig, is_https_url

logger = logging.getLogger(__name__)

TOKEN_PATH = "api/token"
EXECUTIONS_PATH = "api/TestExecution"
BODY_SNIPPET_LENGTH = 500


class AquaClient(ExecutionClient):
    """Posts test executions to the aqua TestExecution API."""

    def __init__(self, config: AquaConfig, http: HttpConfig | None = None) -> None:
        """Initialize aqua client with configuration.

        Raises:
            ConfigurationError: If the base URL is missing or not HTTPS

        """
        self.http = http or HttpConfig()
        super().__init__(retries=self.http.retries)
        self.config = config

        if not config.base_url or not config.base_url.strip():
            raise ConfigurationError("Aqua base URL is required.")
        if not is_https_url(config.base_url):
            raise ConfigurationError("Aqua base URL must be a valid HTTPS URL.")

        self.base_url = config.base_url.strip().rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=self.http.timeout_seconds)
        self._token: str | None = None
        self._auth_lock = asyncio.Lock()

    async def ensure_authenticated(self) -> None:
        """Fetch and cache a bearer token unless one is already cached."""
        if self._token:
            return

        async with self._auth_lock:
            if self._token:
                return
            self._token = await self._request_token()

    async def _request_token(self) -> str:
        username = self.config.username
        password = self.config.password
        if not username or not username.strip() or not password or not password.strip():
            raise AuthenticationError("Aqua credentials are required.")

        form = {
            "grant_type": "password",
            "username": username,
            "password": password,
        }

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            url = f"{self.base_url}/{TOKEN_PATH}"
            async with session.post(url, data=form) as response:
                if not _is_success(response.status):
                    body = await _read_body_snippet(response)
                    logger.error(
                        f"Authentication failed with status {response.status}. "
                        f"Body: {body}"
                    )
                    raise AuthenticationError(
                        f"Authentication failed with status {response.status}"
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise AuthenticationError(
                        "Authentication response is not valid JSON."
                    ) from e

        token = _extract_token(data)
        if not token:
            raise AuthenticationError(
                "Authentication response did not contain a bearer token."
            )

        logger.info("Authenticated with aqua")
        return token

    async def post_executions(self, payload: list[dict[str, object]]) -> None:
        """Post one batch to the TestExecution endpoint."""
        headers = {"Authorization": f"Bearer {self._token}"}

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                url = f"{self.base_url}/{EXECUTIONS_PATH}"
                async with session.post(url, headers=headers, json=payload) as response:
                    status = response.status
                    if _is_success(status):
                        return

                    if status == 429 or status >= 500:
                        raise TransientSubmissionError(
                            f"HTTP {status}",
                            status=status,
                            retry_after=_parse_retry_after(response.headers),
                        )

                    body = await _read_body_snippet(response)
                    logger.error(
                        f"Failed to post executions. Status: {status}. Body: {body}"
                    )
                    raise TerminalSubmissionError(f"HTTP {status}", status=status)
        except asyncio.TimeoutError as e:
            # Task cancellation raises CancelledError and is not caught here.
            raise TransientSubmissionError("Timeout") from e


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _extract_token(data: object) -> str | None:
    """Return ``access_token``, or ``token`` when the former is absent."""
    if not isinstance(data, Mapping):
        return None

    token = data["access_token"] if "access_token" in data else data.get("token")
    if isinstance(token, str) and token.strip():
        return token
    return None


def _parse_retry_after(headers: Mapping[str, str]) -> float | None:
    """Parse a delta-seconds ``Retry-After`` header."""
    raw = headers.get("Retry-After")
    if raw is None:
        return None
    try:
        seconds = float(raw.strip())
    except ValueError:
        logger.debug(f"Ignoring unsupported Retry-After value: {raw!r}")
        return None
    return seconds if seconds > 0 else None


async def _read_body_snippet(response: aiohttp.ClientResponse) -> str:
    try:
        text = await response.text()
    except (aiohttp.ClientError, UnicodeDecodeError):
        return "<no body>"
    if len(text) > BODY_SNIPPET_LENGTH:
        return text[:BODY_SNIPPET_LENGTH] + "..."
    return text
