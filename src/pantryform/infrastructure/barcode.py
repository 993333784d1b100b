"""Barcode images from a remote rendering service (QuickChart by default)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from pantryform.config.models import BarcodeConfig

logger = logging.getLogger(__name__)


class BarcodeError(RuntimeError):
    """The barcode image could not be produced."""


class BarcodeFetcher(Protocol):
    """Returns PNG bytes encoding *text*."""

    def fetch(self, text: str) -> bytes: ...


def build_barcode_url(text: str, config: BarcodeConfig) -> str:
    """Build the image-service URL for *text*."""
    url = httpx.URL(
        config.service_url,
        params={
            "text": text,
            "type": config.type,
            "format": "png",
            "width": config.width_px,
            "height": config.height_px,
            "margin": 0,
        },
    )
    return str(url)


class HttpBarcodeFetcher:
    """Fetch barcode PNGs over HTTP.

    Pass *client* to reuse a connection pool or to inject a mock transport.
    """

    def __init__(self, config: BarcodeConfig, *, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client or httpx.Client(timeout=config.timeout_s)

    def fetch(self, text: str) -> bytes:
        """Download the barcode image.

        Raises:
            BarcodeError: On transport failure or a non-2xx response.
        """
        url = build_barcode_url(text, self._config)
        logger.debug("Fetching barcode %s", url)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            msg = f"Barcode request failed: {exc}"
            raise BarcodeError(msg) from exc
        return response.content

    def close(self) -> None:
        self._client.close()
