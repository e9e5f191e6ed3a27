"""Render and send the Morning Macro Brief email."""

import logging
import smtplib
from dataclasses import dataclass, field, replace
from datetime import datetime
from email.message import EmailMessage
from html import escape
from zoneinfo import ZoneInfo

import httpx

from macro_brief.config import Settings
from macro_brief.indicators import AnalyticsResult
from macro_brief.models import FxResult, IndicatorResult, Insight
from macro_brief.ui.formatters import (
    change_color,
    format_currency,
    format_number,
    format_percentage,
    trend_badge,
)


logger = logging.getLogger(__name__)

TITLE = "Morning Macro Brief"
RESEND_URL = "https://api.resend.com/emails"


@dataclass
class DigestData:
    """Everything the digest template needs."""

    indicators: list[IndicatorResult]
    fx: list[FxResult]
    insights: list[Insight]
    date: str
    timezone: str
    dashboard_url: str
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_result(
        cls, result: AnalyticsResult, settings: Settings, now: datetime | None = None
    ) -> "DigestData":
        now = now or datetime.now(ZoneInfo(settings.timezone))
        return cls(
            indicators=result.indicators,
            fx=result.fx,
            insights=result.insights,
            date=now.strftime("%Y-%m-%d"),
            timezone=settings.timezone,
            dashboard_url=settings.dashboard_url,
        )


def _indicator_row(ind: IndicatorResult) -> str:
    badge_bg, badge_fg = trend_badge(ind.trend)
    return f"""<tr style="border-bottom: 1px solid #e5e7eb;">
      <td style="padding: 8px; font-weight: 600;">{escape(ind.label)}</td>
      <td style="padding: 8px;">{format_number(ind.latest, ind.unit)}</td>
      <td style="padding: 8px; color: {change_color(ind.yoy)};">{format_percentage(ind.yoy)}</td>
      <td style="padding: 8px; color: {change_color(ind.mom)};">{format_percentage(ind.mom)}</td>
      <td style="padding: 8px;">
        <span style="background: {badge_bg}; color: {badge_fg}; padding: 2px 8px; border-radius: 12px; font-size: 12px; font-weight: 600;">{ind.trend.value}</span>
      </td>
    </tr>"""


def _fx_item(fx: FxResult) -> str:
    return f"""<li style="margin: 8px 0; padding: 8px; background: #f9fafb; border-radius: 4px;">
      <strong>{escape(fx.pair)}</strong> — {format_currency(fx.latest)}
      (MoM <span style="color: {change_color(fx.mom)};">{format_percentage(fx.mom)}</span>,
      YoY <span style="color: {change_color(fx.yoy)};">{format_percentage(fx.yoy)}</span>)
    </li>"""


def _insight_item(insight: Insight) -> str:
    return f"""<li style="margin: 12px 0; padding: 12px; background: #eff6ff; border-left: 4px solid #3b82f6; border-radius: 4px;">
      <div style="margin-bottom: 8px;">
        <strong style="color: #1f2937;">{escape(insight.title)}</strong>
        <span style="background: #dbeafe; color: #1d4ed8; padding: 2px 8px; border-radius: 12px; font-size: 11px; font-weight: 600;">{round(insight.confidence * 100)}%</span>
      </div>
      <p style="margin: 0; color: #4b5563; font-size: 14px; line-height: 1.5;">{escape(insight.rationale)}</p>
    </li>"""


def _section(title: str, body: str) -> str:
    return f"""<section style="margin-bottom: 32px;">
      <h2 style="color: #1f2937; font-size: 18px; font-weight: 600; margin: 0 0 16px 0; border-bottom: 2px solid #e5e7eb; padding-bottom: 8px;">{title}</h2>
      {body}
    </section>"""


def render_digest_html(data: DigestData) -> str:
    """Render the digest as a self-contained HTML document with inline styles."""
    indicator_rows = "".join(_indicator_row(ind) for ind in data.indicators)
    fx_items = "".join(_fx_item(fx) for fx in data.fx)
    insight_items = "".join(_insight_item(i) for i in data.insights)

    indicators_table = f"""<table style="width: 100%; border-collapse: collapse; font-size: 14px;">
        <thead>
          <tr style="background: #f3f4f6;">
            <th style="padding: 12px 8px; text-align: left;">Indicator</th>
            <th style="padding: 12px 8px; text-align: left;">Latest</th>
            <th style="padding: 12px 8px; text-align: left;">YoY</th>
            <th style="padding: 12px 8px; text-align: left;">MoM</th>
            <th style="padding: 12px 8px; text-align: left;">Trend</th>
          </tr>
        </thead>
        <tbody>{indicator_rows}</tbody>
      </table>"""

    if insight_items:
        insights_body = f'<ol style="padding-left: 0; margin: 0;">{insight_items}</ol>'
    else:
        insights_body = '<p style="color: #6b7280;">No rules triggered today.</p>'

    error_note = ""
    if data.errors:
        missing = ", ".join(escape(name) for name in sorted(data.errors))
        error_note = f"""<p style="font-size: 12px; color: #b91c1c;">Unavailable this run: {missing}</p>"""

    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{TITLE}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8fafc;">
  <div style="background: white; border-radius: 8px; padding: 24px;">
    <header style="text-align: center; margin-bottom: 32px;">
      <h1 style="color: #1f2937; font-size: 24px; margin: 0 0 8px 0;">{TITLE}</h1>
      <p style="color: #6b7280; margin: 0; font-size: 14px;">{escape(data.date)} ({escape(data.timezone)})</p>
    </header>
    <div style="background: #fef3c7; border: 1px solid #fcd34d; border-radius: 6px; padding: 12px; margin-bottom: 24px;">
      <p style="margin: 0; font-size: 13px; color: #92400e;"><strong>Snapshot of key indicators with quick ideas. Not financial advice.</strong></p>
    </div>
    {error_note}
    {_section("Economic Indicators", indicators_table)}
    {_section("Exchange Rates", f'<ul style="list-style: none; padding: 0; margin: 0;">{fx_items}</ul>')}
    {_section("Market Insights", insights_body)}
    <div style="text-align: center; margin: 32px 0;">
      <a href="{escape(data.dashboard_url, quote=True)}" style="display: inline-block; background: #3b82f6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; font-weight: 600;">Open Full Dashboard</a>
    </div>
    <footer style="border-top: 1px solid #e5e7eb; padding-top: 16px;">
      <p style="font-size: 11px; color: #6b7280; text-align: center; margin: 0;">
        <strong>Disclaimer:</strong> This email is for informational purposes only and not investment advice.<br>
        Data sources: Federal Reserve Economic Data (FRED), exchangerate.host
      </p>
    </footer>
  </div>
</body>
</html>"""


def build_message(
    html: str, subject: str, sender: str, recipients: list[str]
) -> EmailMessage:
    """Build a multipart message with a plain-text fallback."""
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = ", ".join(recipients)
    message.set_content(f"{TITLE}: open this email in an HTML-capable client.")
    message.add_alternative(html, subtype="html")
    return message


def send_digest(
    settings: Settings, html: str, subject: str, recipients: list[str] | None = None
) -> None:
    """
    Deliver the digest over SMTP with STARTTLS.

    Raises:
        ValueError: Missing SMTP credentials or recipients
        smtplib.SMTPException: Delivery failure
    """
    if recipients:
        settings = replace(settings, digest_to=recipients)
    settings.validate_email()
    recipients = settings.digest_to

    message = build_message(html, subject, settings.digest_from, recipients)

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
        smtp.starttls()
        smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.send_message(message)

    logger.info(f"Digest sent to {', '.join(recipients)}")


def send_digest_api(
    settings: Settings,
    html: str,
    subject: str,
    recipients: list[str] | None = None,
    client: httpx.Client | None = None,
) -> str:
    """
    Deliver the digest through the Resend email API.

    Returns:
        Message id assigned by the API (empty if none was returned)

    Raises:
        ValueError: Missing API key or recipients
        httpx.HTTPError: Request or delivery failure
    """
    if recipients:
        settings = replace(settings, digest_to=recipients)
    settings.validate_email("api")
    recipients = settings.digest_to

    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=30.0)
    try:
        response = client.post(
            RESEND_URL,
            headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            json={
                "from": settings.digest_from,
                "to": recipients,
                "subject": subject,
                "html": html,
            },
        )
        response.raise_for_status()
    finally:
        if owns_client:
            client.close()

    body = response.json()
    message_id = body.get("id", "") if isinstance(body, dict) else ""
    logger.info(f"Digest sent to {', '.join(recipients)} via API (id={message_id or 'n/a'})")
    return message_id


def deliver_digest(
    settings: Settings, html: str, subject: str, recipients: list[str] | None = None
) -> str:
    """
    Send over the configured transport.

    Returns:
        The transport used, "api" or "smtp"
    """
    if settings.email_transport == "api":
        send_digest_api(settings, html, subject, recipients)
    else:
        send_digest(settings, html, subject, recipients)
    return settings.email_transport


def main() -> None:
    """CLI entry point."""
    import argparse
    from pathlib import Path

    from macro_brief.data import load_snapshot
    from macro_brief.indicators import InsufficientDataError

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Send the Morning Macro Brief digest")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render only, do not send",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Also write the rendered HTML to this path",
    )
    parser.add_argument(
        "--to",
        type=str,
        default=None,
        help="Comma separated recipients (overrides DAILY_DIGEST_TO)",
    )
    args = parser.parse_args()

    settings = Settings()
    try:
        result, market_data = load_snapshot(settings)
    except InsufficientDataError as e:
        print(f"Error: {e}")
        raise SystemExit(1)
    except ValueError as e:
        print(f"Configuration error: {e}")
        raise SystemExit(1)

    data = DigestData.from_result(result, settings)
    data.errors = market_data.errors
    html = render_digest_html(data)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        print(f"Digest written to: {path}")

    if args.dry_run:
        return

    recipients = [r.strip() for r in args.to.split(",") if r.strip()] if args.to else None
    try:
        deliver_digest(settings, html, f"{TITLE} — {data.date}", recipients)
    except ValueError as e:
        print(f"Configuration error: {e}")
        raise SystemExit(1)
    except smtplib.SMTPException as e:
        print(f"SMTP error: {e}")
        raise SystemExit(1)
    except httpx.HTTPError as e:
        print(f"Email API error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
