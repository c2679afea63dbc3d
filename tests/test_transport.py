"""Unit tests for subdomain_checker/checker/transport.py

``requests.head`` is mocked throughout; no real network access.
"""

from __future__ import annotations

import socket
import threading
import time
from unittest.mock import patch

import pytest
import requests
from urllib3.exceptions import MaxRetryError, NameResolutionError
from urllib3.exceptions import SSLError as Urllib3SSLError

from subdomain_checker.checker.transport import (
    Deadline,
    NetworkFailure,
    OtherTransportError,
    ProbeResponse,
    ProbeTimeout,
    ResolutionFailure,
    head,
)
from tests.conftest import make_head_response


def _resolution_error() -> requests.ConnectionError:
    """A ConnectionError caused by a failed getaddrinfo()."""
    exc = requests.ConnectionError("Max retries exceeded with url: /")
    exc.__cause__ = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    return exc


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------


class TestDeadline:
    def test_remaining_counts_down(self):
        deadline = Deadline.after(10)
        assert 9.0 < deadline.remaining() <= 10.0
        assert deadline.expired is False

    def test_past_deadline_is_expired(self):
        deadline = Deadline(time.monotonic() - 1)
        assert deadline.remaining() == 0.0
        assert deadline.expired is True


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequest:
    @patch("subdomain_checker.checker.transport.requests.head")
    def test_sends_head_without_redirects_or_cache(self, mock_head):
        """The probe is a HEAD to https://host with redirects and caching off."""
        mock_head.return_value = make_head_response(200)

        head("myapp.vercel.app", Deadline.after(3))

        args, kwargs = mock_head.call_args
        assert args[0] == "https://myapp.vercel.app"
        assert kwargs["allow_redirects"] is False
        assert kwargs["headers"]["Cache-Control"] == "no-cache"
        assert 0 < kwargs["timeout"] <= 3

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_returns_status_and_headers(self, mock_head):
        mock_head.return_value = make_head_response(
            404, {"X-Vercel-Error": "DEPLOYMENT_NOT_FOUND", "Server": "Vercel"}
        )

        resp = head("myapp.vercel.app", Deadline.after(3))

        assert isinstance(resp, ProbeResponse)
        assert resp.status_code == 404
        assert resp.headers["x-vercel-error"] == "DEPLOYMENT_NOT_FOUND"
        assert resp.headers["server"] == "Vercel"
        mock_head.return_value.close.assert_called_once()

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_redirect_is_returned_not_followed(self, mock_head):
        mock_head.return_value = make_head_response(308, {"Location": "https://elsewhere.example"})

        resp = head("myapp.vercel.app", Deadline.after(3))

        assert resp.status_code == 308
        assert mock_head.call_count == 1

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_expired_deadline_skips_network(self, mock_head):
        with pytest.raises(ProbeTimeout):
            head("myapp.vercel.app", Deadline(time.monotonic() - 1))
        mock_head.assert_not_called()


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestErrorMapping:
    @patch("subdomain_checker.checker.transport.requests.head")
    def test_read_timeout(self, mock_head):
        mock_head.side_effect = requests.ReadTimeout("read timed out")
        with pytest.raises(ProbeTimeout):
            head("slow.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_connect_timeout_is_timeout_not_network_failure(self, mock_head):
        """ConnectTimeout is also a ConnectionError; the timeout must win."""
        mock_head.side_effect = requests.ConnectTimeout("connect timed out")
        with pytest.raises(ProbeTimeout):
            head("slow.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_hard_deadline_while_waiting(self, mock_head):
        """A request that outlives the deadline surfaces as ProbeTimeout."""
        mock_head.side_effect = lambda *a, **kw: time.sleep(0.5)
        with pytest.raises(ProbeTimeout):
            head("hang.vercel.app", Deadline.after(0.05))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_gaierror_cause_is_resolution_failure(self, mock_head):
        mock_head.side_effect = _resolution_error()
        with pytest.raises(ResolutionFailure):
            head("nowhere.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_resolution_message_is_resolution_failure(self, mock_head):
        mock_head.side_effect = requests.ConnectionError(
            "Failed to resolve 'nowhere.vercel.app' ([Errno -3] "
            "Temporary failure in name resolution)"
        )
        with pytest.raises(ResolutionFailure):
            head("nowhere.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_connection_refused_is_network_failure(self, mock_head):
        mock_head.side_effect = requests.ConnectionError("[Errno 111] Connection refused")
        with pytest.raises(NetworkFailure):
            head("refused.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_invalid_url_is_other_error(self, mock_head):
        mock_head.side_effect = requests.exceptions.InvalidURL("Invalid URL 'https://a b.vercel.app'")
        with pytest.raises(OtherTransportError) as excinfo:
            head("a b.vercel.app", Deadline.after(3))
        assert "Invalid URL" in excinfo.value.detail

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_non_requests_error_is_other_error(self, mock_head):
        mock_head.side_effect = UnicodeError("label too long")
        with pytest.raises(OtherTransportError) as excinfo:
            head("x" * 100 + ".vercel.app", Deadline.after(3))
        assert excinfo.value.detail == "label too long"

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_urllib3_name_resolution_error_is_resolution_failure(self, mock_head):
        """The shape requests really raises: ConnectionError(MaxRetryError(reason=...))."""
        reason = NameResolutionError(
            "ghost.vercel.app",
            None,
            socket.gaierror(socket.EAI_NONAME, "Name or service not known"),
        )
        retry_error = MaxRetryError(None, "/", reason)
        wrapped = requests.ConnectionError(retry_error)
        wrapped.__context__ = retry_error
        mock_head.side_effect = wrapped

        with pytest.raises(ResolutionFailure):
            head("ghost.vercel.app", Deadline.after(3))

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_tls_failure_is_network_failure(self, mock_head):
        reason = Urllib3SSLError("certificate verify failed: hostname mismatch")
        mock_head.side_effect = requests.exceptions.SSLError(MaxRetryError(None, "/", reason))

        with pytest.raises(NetworkFailure):
            head("badcert.vercel.app", Deadline.after(3))


# ---------------------------------------------------------------------------
# Hostname safety
# ---------------------------------------------------------------------------


class TestHostnameSafety:
    @pytest.mark.parametrize(
        "hostname",
        [
            "a/b.vercel.app",
            "x#y.vercel.app",
            "a?b.vercel.app",
            "h:443/.vercel.app",
            "evil.example:443/.vercel.app",
            "evil.example@x.vercel.app",
        ],
    )
    @patch("subdomain_checker.checker.transport.requests.head")
    def test_url_delimiters_are_rejected_before_sending(self, mock_head, hostname):
        """Input that would move the request to another host never leaves."""
        with pytest.raises(OtherTransportError) as excinfo:
            head(hostname, Deadline.after(3))

        assert "Invalid URL" in excinfo.value.detail
        mock_head.assert_not_called()

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_plain_hostname_is_accepted(self, mock_head):
        mock_head.return_value = make_head_response(200)

        head("my-app-2.vercel.app", Deadline.after(3))

        assert mock_head.call_args[0][0] == "https://my-app-2.vercel.app"


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrentProbes:
    @patch("subdomain_checker.checker.transport.requests.head")
    def test_slow_probes_do_not_starve_a_fast_one(self, mock_head):
        """Each probe has its own worker; busy probes never queue a new one."""

        def fake_head(url, **kwargs):
            if "slow" in url:
                time.sleep(1.0)
            return make_head_response(200)

        mock_head.side_effect = fake_head

        slow_threads = [
            threading.Thread(target=head, args=(f"slow{i}.vercel.app", Deadline.after(2)))
            for i in range(12)
        ]
        for thread in slow_threads:
            thread.start()

        started = time.monotonic()
        resp = head("fast.vercel.app", Deadline.after(0.5))
        elapsed = time.monotonic() - started

        for thread in slow_threads:
            thread.join()

        assert resp.status_code == 200
        assert elapsed < 0.5
        assert any(c.args[0] == "https://fast.vercel.app" for c in mock_head.call_args_list)

    @patch("subdomain_checker.checker.transport.requests.head")
    def test_socket_timeout_taken_when_request_starts(self, mock_head):
        mock_head.return_value = make_head_response(200)
        deadline = Deadline.after(2)

        head("myapp.vercel.app", deadline)

        assert 0 < mock_head.call_args[1]["timeout"] <= 2
