"""Tests for the email digest."""

from __future__ import annotations

import dataclasses
import json
import math
from datetime import datetime

import httpx
import pytest

from macro_brief.models import FxResult, Insight, Trend, Unit
from macro_brief.ui import email_digest
from macro_brief.ui.email_digest import (
    RESEND_URL,
    DigestData,
    build_message,
    deliver_digest,
    render_digest_html,
    send_digest,
    send_digest_api,
)
from tests.helpers import make_indicator


class FakeSMTP:
    """Stands in for smtplib.SMTP and records the session."""

    instances: list["FakeSMTP"] = []

    def __init__(self, host: str, port: int, timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.calls: list[str] = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self) -> "FakeSMTP":
        return self

    def __exit__(self, *args) -> None:
        self.calls.append("quit")

    def starttls(self) -> None:
        self.calls.append("starttls")

    def login(self, user: str, password: str) -> None:
        self.calls.append(f"login:{user}")

    def send_message(self, message) -> None:
        self.calls.append("send")
        self.messages.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_digest.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def digest() -> DigestData:
    return DigestData(
        indicators=[
            make_indicator(
                "CPI", latest=307.5, mom=0.4, yoy=3.1,
                trend=Trend.VOLATILE_UP, unit=Unit.INDEX, label="Consumer Price Index",
            ),
            make_indicator("UNRATE", latest=3.9, mom=math.nan, yoy=-0.3, label="Unemployment Rate"),
        ],
        fx=[FxResult(base="USD", symbol="NGN", latest=1520.5, mom=3.4, yoy=60.0)],
        insights=[
            Insight(
                title="De-risk portfolio",
                rationale="Rising/volatile inflation suggests increasing cash buffer.",
                confidence=0.65,
            )
        ],
        date="2024-03-01",
        timezone="America/New_York",
        dashboard_url="http://localhost:8501",
    )


class TestRenderDigest:
    def test_contains_sections(self, digest) -> None:
        html = render_digest_html(digest)

        assert "Morning Macro Brief" in html
        assert "2024-03-01 (America/New_York)" in html
        assert "Consumer Price Index" in html
        assert "307.5" in html
        assert "VOLATILE_UP" in html
        assert "USD/NGN" in html
        assert "1520.5000" in html
        assert "De-risk portfolio" in html
        assert "65%" in html
        assert 'href="http://localhost:8501"' in html

    def test_unknown_change_is_placeholder(self, digest) -> None:
        html = render_digest_html(digest)
        assert "—</td>" in html
        assert "+0.0%" not in html

    def test_no_insights(self, digest) -> None:
        digest.insights = []
        assert "No rules triggered today." in render_digest_html(digest)

    def test_errors_are_listed(self, digest) -> None:
        digest.errors = {"FX": "quota", "DGS10": "timeout"}
        assert "Unavailable this run: DGS10, FX" in render_digest_html(digest)

    def test_text_is_escaped(self, digest) -> None:
        digest.insights = [Insight(title="<b>x</b>", rationale="a & b", confidence=0.5)]
        html = render_digest_html(digest)
        assert "&lt;b&gt;x&lt;/b&gt;" in html
        assert "a &amp; b" in html


class TestDigestData:
    def test_from_result(self, settings) -> None:
        from macro_brief.indicators import AnalyticsResult

        result = AnalyticsResult(as_of="2024-02-01", indicators=[], fx=[], insights=[])
        data = DigestData.from_result(result, settings, now=datetime(2024, 3, 1, 7, 0))

        assert data.date == "2024-03-01"
        assert data.timezone == "America/New_York"
        assert data.dashboard_url == "http://localhost:8501"


class TestBuildMessage:
    def test_headers_and_parts(self) -> None:
        message = build_message("<p>hi</p>", "Brief", "from@test.local", ["a@x.io", "b@x.io"])

        assert message["Subject"] == "Brief"
        assert message["From"] == "from@test.local"
        assert message["To"] == "a@x.io, b@x.io"
        assert "<p>hi</p>" in message.get_body(("html",)).get_content()
        assert "HTML-capable" in message.get_body(("plain",)).get_content()


class TestSendDigest:
    def test_sends_over_starttls(self, settings, fake_smtp) -> None:
        send_digest(settings, "<p>hi</p>", "Brief")

        smtp = fake_smtp.instances[0]
        assert (smtp.host, smtp.port) == ("smtp.test.local", 587)
        assert smtp.calls == ["starttls", "login:user@test.local", "send", "quit"]
        assert smtp.messages[0]["To"] == "reader@test.local"

    def test_recipient_override(self, settings, fake_smtp) -> None:
        send_digest(settings, "<p>hi</p>", "Brief", recipients=["other@test.local"])
        assert fake_smtp.instances[0].messages[0]["To"] == "other@test.local"
        assert settings.digest_to == ["reader@test.local"]

    def test_missing_credentials(self, settings, fake_smtp) -> None:
        settings.smtp_password = ""
        with pytest.raises(ValueError, match="SMTP"):
            send_digest(settings, "<p>hi</p>", "Brief")
        assert fake_smtp.instances == []

    def test_missing_recipients(self, settings, fake_smtp) -> None:
        settings.digest_to = []
        with pytest.raises(ValueError, match="recipients"):
            send_digest(settings, "<p>hi</p>", "Brief")


class TestSendDigestApi:
    def test_posts_to_resend(self, settings) -> None:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "msg_123"})

        settings = dataclasses.replace(settings, resend_api_key="re_test")
        client = httpx.Client(transport=httpx.MockTransport(handler))

        message_id = send_digest_api(settings, "<p>hi</p>", "Brief", client=client)

        assert message_id == "msg_123"
        request = requests[0]
        assert str(request.url) == RESEND_URL
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer re_test"
        assert json.loads(request.content) == {
            "from": "alerts@test.local",
            "to": ["reader@test.local"],
            "subject": "Brief",
            "html": "<p>hi</p>",
        }

    def test_recipient_override(self, settings) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "msg_1"})

        settings = dataclasses.replace(settings, resend_api_key="re_test")
        client = httpx.Client(transport=httpx.MockTransport(handler))
        send_digest_api(settings, "<p>hi</p>", "Brief", ["a@x.io", "b@x.io"], client=client)

        assert bodies[0]["to"] == ["a@x.io", "b@x.io"]

    def test_api_error_propagates(self, settings) -> None:
        settings = dataclasses.replace(settings, resend_api_key="re_test")
        client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad"}))
        )
        with pytest.raises(httpx.HTTPStatusError):
            send_digest_api(settings, "<p>hi</p>", "Brief", client=client)

    def test_missing_key(self, settings) -> None:
        with pytest.raises(ValueError, match="RESEND_API_KEY"):
            send_digest_api(settings, "<p>hi</p>", "Brief")


class TestDeliverDigest:
    def test_smtp_without_api_key(self, settings, fake_smtp) -> None:
        assert deliver_digest(settings, "<p>hi</p>", "Brief") == "smtp"
        assert len(fake_smtp.instances) == 1

    def test_api_when_key_is_set(self, settings, fake_smtp, monkeypatch) -> None:
        sent = []
        monkeypatch.setattr(
            email_digest,
            "send_digest_api",
            lambda settings, html, subject, recipients=None: sent.append(subject),
        )
        settings = dataclasses.replace(settings, resend_api_key="re_test")

        assert deliver_digest(settings, "<p>hi</p>", "Brief") == "api"
        assert sent == ["Brief"]
        assert fake_smtp.instances == []
