"""
Pinata pinJSONToIPFS client: pins a content payload, returns its IPFS CID.

Auth: PINATA_JWT (Bearer) or the PINATA_API_KEY / PINATA_SECRET_API_KEY pair.
A response without IpfsHash counts as a failed call.
"""

from __future__ import annotations

from typing import Any

import httpx

from credit_passport.config.settings import Settings
from credit_passport.core.exceptions import TransportError
from credit_passport.passport_logging import get_logger

logger = get_logger(__name__)

_ERROR_BODY_LIMIT = 2000


class PinataPinner:
    """Content storage collaborator. Credentials are resolved at construction (ConfigurationError)."""

    def __init__(self, settings: Settings, *, http_client: httpx.Client | None = None) -> None:
        self._headers = {"Content-Type": "application/json", **settings.pinata_headers()}
        self._url = settings.pinata_api_url
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=settings.http_timeout_sec)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "PinataPinner":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def pin_json(self, content: dict[str, Any]) -> str:
        """Pin content; return the IPFS hash. TransportError on any failure."""
        try:
            resp = self._client.post(self._url, json={"pinataContent": content}, headers=self._headers)
        except httpx.HTTPError as e:
            logger.warning("pinata_request_failed", error=type(e).__name__)
            raise TransportError(f"Pinata request failed: {e}") from e

        text = resp.text
        if not resp.is_success:
            logger.warning("pinata_error_response", status=resp.status_code)
            raise TransportError(f"Pinata error {resp.status_code}", status_code=resp.status_code, body=text[:_ERROR_BODY_LIMIT])

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError("Pinata response is not JSON", status_code=resp.status_code, body=text[:_ERROR_BODY_LIMIT]) from e
        cid = data.get("IpfsHash") if isinstance(data, dict) else None
        if not isinstance(cid, str) or not cid.strip():
            raise TransportError("Pinata response missing IpfsHash", status_code=resp.status_code, body=text[:_ERROR_BODY_LIMIT])
        logger.info("pinata_pinned", cid=cid)
        return cid.strip()
