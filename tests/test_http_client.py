"""Tests for the shared HTTP helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from common.errors import NotFoundError, UpstreamError
from common.http_client import get_bytes, get_json, get_text


def _response(status, content=b""):
    res = MagicMock()
    res.status_code = status
    res.content = content
    res.text = content.decode("utf-8")
    return res


class TestGetBytes:
    """Status and transport handling."""

    @patch("common.http_client.requests.get")
    def test_ok(self, mock_get):
        mock_get.return_value = _response(200, b"v1.0.0\n")
        assert get_bytes("https://proxy.example.com/m/@v/list", context="test", timeout=3) == b"v1.0.0\n"
        mock_get.assert_called_once_with("https://proxy.example.com/m/@v/list", timeout=3, headers=None)

    @pytest.mark.parametrize("status", [404, 410])
    @patch("common.http_client.requests.get")
    def test_not_found(self, mock_get, status):
        mock_get.return_value = _response(status, b"not found: unknown revision")
        with pytest.raises(NotFoundError):
            get_bytes("https://proxy.example.com/m/@v/v9.info", context="test")

    @patch("common.http_client.requests.get")
    def test_server_error(self, mock_get):
        mock_get.return_value = _response(503, b"unavailable")
        with pytest.raises(UpstreamError) as exc:
            get_bytes("https://proxy.example.com/x", context="test")
        assert "503" in str(exc.value)

    @patch("common.http_client.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        with pytest.raises(UpstreamError):
            get_bytes("https://proxy.example.com/x", context="test", timeout=1)

    @patch("common.http_client.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(UpstreamError):
            get_bytes("https://proxy.example.com/x", context="test")

    def test_session_is_used(self):
        session = MagicMock()
        session.get.return_value = _response(200, b"ok")
        assert get_text("https://proxy.example.com/x", context="test", session=session) == "ok"
        session.get.assert_called_once()


class TestGetJson:
    """JSON decoding."""

    @patch("common.http_client.requests.get")
    def test_json(self, mock_get):
        mock_get.return_value = _response(200, b'{"Version": "v1.0.0"}')
        assert get_json("https://proxy.example.com/x", context="test") == {"Version": "v1.0.0"}

    @patch("common.http_client.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(200, b"<html>")
        with pytest.raises(UpstreamError):
            get_json("https://proxy.example.com/x", context="test")
