"""
Email templates for LORO.

All templates use inline CSS for maximum email client compatibility.
Each template function returns (subject, html_body, text_body).
"""

from __future__ import annotations

from html import escape

# Color constants
BG_PAGE = "#F4F6F8"
BG_CARD = "#FFFFFF"
ACCENT = "#0F62FE"
TEXT_PRIMARY = "#161616"
TEXT_SECONDARY = "#525252"
BORDER = "#E0E0E0"

_STATUS_LABELS = {
    "approved": "approved",
    "rejected": "rejected",
    "cancelled_by_user": "cancelled",
    "cancelled_by_admin": "cancelled by an administrator",
    "pending": "submitted and is awaiting review",
}


def _base_layout(content: str, app_name: str = "LORO") -> str:
    """Wrap content in the base email layout."""
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{app_name}</title>
</head>
<body style="margin: 0; padding: 0; background-color: {BG_PAGE}; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
    <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="100%" style="background-color: {BG_PAGE};">
        <tr>
            <td align="center" style="padding: 40px 20px;">
                <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="600" style="max-width: 600px; width: 100%;">
                    <tr>
                        <td align="center" style="padding-bottom: 24px;">
                            <span style="font-size: 22px; font-weight: 700; color: {ACCENT};">{app_name}</span>
                        </td>
                    </tr>
                    <tr>
                        <td style="background-color: {BG_CARD}; border: 1px solid {BORDER}; border-radius: 8px; padding: 32px;">
                            {content}
                        </td>
                    </tr>
                    <tr>
                        <td align="center" style="padding-top: 24px;">
                            <p style="color: {TEXT_SECONDARY}; font-size: 12px; line-height: 1.5; margin: 0;">
                                This email was sent by {app_name} on behalf of your organisation.
                            </p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>"""


def _button(url: str, label: str) -> str:
    """Render a CTA button."""
    return f"""\
<table role="presentation" cellspacing="0" cellpadding="0" border="0" style="margin: 24px auto;">
    <tr>
        <td align="center" style="background-color: {ACCENT}; border-radius: 6px;">
            <a href="{url}" target="_blank" style="display: inline-block; padding: 12px 28px; color: #FFFFFF; font-size: 15px; font-weight: 600; text-decoration: none;">
                {label}
            </a>
        </td>
    </tr>
</table>"""


def _paragraph(text: str) -> str:
    return f'<p style="color: {TEXT_SECONDARY}; font-size: 15px; line-height: 1.6; margin: 0 0 12px 0;">{text}</p>'


def leave_status_update(
    name: str,
    leave_type: str,
    start_date: str,
    end_date: str,
    status: str,
    reason: str | None = None,
) -> tuple[str, str, str]:
    """
    Sent to the applicant whenever their leave changes status.

    Returns:
        (subject, html_body, text_body)
    """
    label = _STATUS_LABELS.get(status, status.replace("_", " "))
    kind = leave_type.replace("_", " ")
    subject = f"Your {kind} leave has been {label.split(' ')[0]}"
    lines = [
        f"Hi {escape(name)},",
        f"Your {escape(kind)} leave from <strong>{start_date}</strong> to <strong>{end_date}</strong> has been {label}.",
    ]
    if reason:
        lines.append(f"Reason: {escape(reason)}")
    content = (
        f'<h1 style="color: {TEXT_PRIMARY}; font-size: 22px; margin: 0 0 16px 0;">Leave {label.split(" ")[0]}</h1>'
        + "".join(_paragraph(line) for line in lines)
    )
    text_body = (
        f"Hi {name},\n\n"
        f"Your {kind} leave from {start_date} to {end_date} has been {label}.\n"
        + (f"Reason: {reason}\n" if reason else "")
        + "\n-- LORO"
    )
    return subject, _base_layout(content), text_body


def quotation_sent(
    client_name: str,
    quotation_number: str,
    total_amount: str,
    currency: str,
    review_url: str,
    valid_until: str | None = None,
) -> tuple[str, str, str]:
    """
    Sent to a client when a quotation is ready for their review.

    Returns:
        (subject, html_body, text_body)
    """
    subject = f"Quotation {quotation_number} is ready for your review"
    validity = f" It is valid until {valid_until}." if valid_until else ""
    content = (
        f'<h1 style="color: {TEXT_PRIMARY}; font-size: 22px; margin: 0 0 16px 0;">Your quotation is ready</h1>'
        + _paragraph(f"Hi {escape(client_name)},")
        + _paragraph(
            f"Quotation <strong>{quotation_number}</strong> for <strong>{currency} {total_amount}</strong> "
            f"is ready for your review.{validity}"
        )
        + _button(review_url, "Review Quotation")
        + _paragraph(f'If the button doesn\'t work, copy and paste this URL: <a href="{review_url}">{review_url}</a>')
    )
    text_body = (
        f"Hi {client_name},\n\n"
        f"Quotation {quotation_number} for {currency} {total_amount} is ready for your review.{validity}\n\n"
        f"{review_url}\n\n"
        f"-- LORO"
    )
    return subject, _base_layout(content), text_body


def asset_assigned(name: str, brand: str, model_number: str, serial_number: str) -> tuple[str, str, str]:
    """
    Sent to a user when an asset is assigned to them.

    Returns:
        (subject, html_body, text_body)
    """
    subject = f"{brand} {model_number} has been assigned to you"
    content = (
        f'<h1 style="color: {TEXT_PRIMARY}; font-size: 22px; margin: 0 0 16px 0;">New asset assigned</h1>'
        + _paragraph(f"Hi {escape(name)},")
        + _paragraph(
            f"<strong>{escape(brand)} {escape(model_number)}</strong> (serial {escape(serial_number)}) "
            "is now registered to you."
        )
    )
    text_body = (
        f"Hi {name},\n\n"
        f"{brand} {model_number} (serial {serial_number}) is now registered to you.\n\n"
        f"-- LORO"
    )
    return subject, _base_layout(content), text_body


def asset_restored(name: str, brand: str, model_number: str, serial_number: str) -> tuple[str, str, str]:
    """Sent to the owner when a deleted asset is restored."""
    subject = f"{brand} {model_number} has been restored"
    content = (
        f'<h1 style="color: {TEXT_PRIMARY}; font-size: 22px; margin: 0 0 16px 0;">Asset restored</h1>'
        + _paragraph(f"Hi {escape(name)},")
        + _paragraph(
            f"<strong>{escape(brand)} {escape(model_number)}</strong> (serial {escape(serial_number)}) "
            "is registered to you again."
        )
    )
    text_body = (
        f"Hi {name},\n\n"
        f"{brand} {model_number} (serial {serial_number}) is registered to you again.\n\n"
        f"-- LORO"
    )
    return subject, _base_layout(content), text_body
