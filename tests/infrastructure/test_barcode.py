"""Tests for the HTTP barcode fetcher."""

import httpx
import pytest

from pantryform.config.models import BarcodeConfig
from pantryform.infrastructure.barcode import BarcodeError, HttpBarcodeFetcher, build_barcode_url


class TestBuildBarcodeUrl:
    def test_default_service(self) -> None:
        url = httpx.URL(build_barcode_url("100000000543", BarcodeConfig()))
        assert url.host == "quickchart.io"
        assert url.path == "/barcode"
        assert url.params["text"] == "100000000543"
        assert url.params["type"] == "code128"
        assert url.params["format"] == "png"
        assert url.params["width"] == "1100"
        assert url.params["height"] == "500"
        assert url.params["margin"] == "0"

    def test_text_is_encoded(self) -> None:
        url = build_barcode_url("A B&C", BarcodeConfig())
        assert "A B&C" not in url
        assert httpx.URL(url).params["text"] == "A B&C"


class TestHttpBarcodeFetcher:
    def test_returns_content(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"\x89PNG fake")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        fetcher = HttpBarcodeFetcher(BarcodeConfig(), client=client)
        assert fetcher.fetch("100000000543") == b"\x89PNG fake"
        assert seen[0].url.params["text"] == "100000000543"
        fetcher.close()

    def test_http_error_status(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
        fetcher = HttpBarcodeFetcher(BarcodeConfig(), client=client)
        with pytest.raises(BarcodeError, match="503"):
            fetcher.fetch("1")

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        fetcher = HttpBarcodeFetcher(BarcodeConfig(), client=client)
        with pytest.raises(BarcodeError, match="offline"):
            fetcher.fetch("1")
