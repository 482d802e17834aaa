import json
import logging
from typing import Any, Optional

import httpx

from datcord.config import ApiConfig, ClientConfig

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Authenticated REST client.

    Each call is a single HTTPS request with no retries and no timeout.
    Transport failures (refused connection, DNS) propagate as httpx errors.

    Example:
        async with ApiClient("Bot abc...") as rest:
            me = await rest.get("/users/@me")
            await rest.post(f"/channels/{channel_id}/messages", {"content": "hi"})
    """

    def __init__(
        self,
        token: str,
        config: ClientConfig | ApiConfig | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if isinstance(config, ClientConfig):
            config = config.api
        self.token = token
        self.config = config or ApiConfig()
        self._client = httpx.AsyncClient(
            headers={"Authorization": token},
            timeout=None,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def url_for(self, path: str) -> str:
        """Full request URL for an API path."""
        api = self.config
        return f"https://{api.host}:{api.port}{api.base_path}{path}"

    async def get(self, path: str) -> Any:
        """Perform a GET request. Returns decoded JSON, or raw text if the body isn't JSON."""
        logger.debug(f"[REST] GET {path}")
        response = await self._client.get(self.url_for(path))
        return self._decode(response)

    async def post(self, path: str, body: Any) -> Any:
        """Perform a POST request with a JSON body."""
        logger.debug(f"[REST] POST {path}")
        response = await self._client.post(
            self.url_for(path),
            content=json.dumps(body),
            headers={"Content-Type": "application/json"},
        )
        return self._decode(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _decode(self, response: httpx.Response) -> Any:
        if response.is_error:
            logger.warning(
                f"[REST] {response.request.method} {response.request.url.path} "
                f"returned {response.status_code}"
            )
        text = response.text
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
