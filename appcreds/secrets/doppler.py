"""Doppler secret vault client.

Uses httpx for async HTTP calls against the Doppler REST API. One client
is built per process and shared read-only by every resolver call; the
underlying `httpx.AsyncClient` pools connections and is safe for
concurrent requests.

Read path:
    GET /v3/configs/config/secret?project=...&config=...&name=...
    -> {"name": ..., "value": {"raw": ..., "computed": ...}}

The computed value (with Doppler references expanded) is returned.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from appcreds.core.errors import SecretStoreError

DOPPLER_API_BASE = "https://api.doppler.com"
SECRET_ENDPOINT = "/v3/configs/config/secret"


@dataclass(frozen=True)
class DopplerSecret:
    """A single secret read from Doppler. `value` is never logged."""

    name: str
    value: str

    def __repr__(self) -> str:
        return f"DopplerSecret(name={self.name!r}, value=<redacted>)"


class DopplerClient:
    """Read-only Doppler client.

    Pass `http_client` to share a transport (tests use `httpx.MockTransport`);
    otherwise a client is created here and closed by `aclose()`.
    """

    def __init__(
        self,
        token: str,
        api_base: str = DOPPLER_API_BASE,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not token:
            raise ValueError("Doppler token is required to build a DopplerClient")
        self._api_base = api_base.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    async def get(self, project: str, config: str, name: str) -> DopplerSecret:
        """Fetch one secret from `project`/`config`.

        Raises:
            SecretStoreError: on transport failure, non-2xx status, or a
                response without a computed value.
        """
        try:
            response = await self._client.get(
                f"{self._api_base}{SECRET_ENDPOINT}",
                headers=self._headers,
                params={"project": project, "config": config, "name": name},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise SecretStoreError(
                name,
                f"Doppler returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise SecretStoreError(name, f"Doppler request failed: {exc}") from exc
        except ValueError as exc:
            raise SecretStoreError(name, "Doppler returned invalid JSON") from exc

        if not isinstance(data, dict) or not isinstance(data.get("value"), dict):
            raise SecretStoreError(name, "Doppler response has no secret value object")

        value = data["value"].get("computed")
        if value is None:
            raise SecretStoreError(name, "secret has no computed value")

        return DopplerSecret(name=data.get("name", name), value=str(value))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DopplerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
