"""
Tests for the requests-based HTTP client.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from webcrawler.parser.http_client import DEFAULT_USER_AGENT, HTTPClient
from webcrawler.utils.errors import CrawlerError


def make_response(status_code=200, text="<html></html>"):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.content = text.encode("utf-8")
    if status_code >= 400:
        response.raise_for_status = Mock(side_effect=requests.exceptions.HTTPError(f"{status_code} Error"))
    else:
        response.raise_for_status = Mock()
    return response


class TestHTTPClient:

    def test_default_headers(self):
        client = HTTPClient(headers={"X-Test": "1"})

        assert client.session.headers["User-Agent"] == DEFAULT_USER_AGENT
        assert client.session.headers["X-Test"] == "1"
        client.close()

    def test_get_uses_default_timeout(self):
        client = HTTPClient(timeout=3.5)
        response = make_response(text="<p>ok</p>")

        with patch.object(client.session, 'get', return_value=response) as mock_get:
            assert client.get("http://example.com/") is response

        mock_get.assert_called_once_with("http://example.com/", timeout=3.5)

    def test_explicit_timeout_wins(self):
        client = HTTPClient(timeout=3.5)

        with patch.object(client.session, 'get', return_value=make_response()) as mock_get:
            client.get("http://example.com/", timeout=1)

        mock_get.assert_called_once_with("http://example.com/", timeout=1)

    def test_error_status_raises_crawler_error(self):
        client = HTTPClient()

        with patch.object(client.session, 'get', return_value=make_response(status_code=404)):
            with pytest.raises(CrawlerError) as exc_info:
                client.get("http://example.com/missing")

        assert exc_info.value.details == {"method": "GET", "url": "http://example.com/missing"}
        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    def test_connection_error_raises_crawler_error(self):
        client = HTTPClient()

        with patch.object(client.session, 'get', side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(CrawlerError, match="HTTP request failed"):
                client.get("http://example.com/")

    def test_context_manager_closes_session(self):
        with patch("webcrawler.parser.http_client.requests.Session") as mock_session_cls:
            with HTTPClient():
                pass

        mock_session_cls.return_value.close.assert_called_once_with()
