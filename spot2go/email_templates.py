"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility
"""

import html
from typing import Optional

# App theme colors
THEME = {
    "primary": "#4f46e5",
    "primary_dark": "#4338ca",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="8px 0"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 8px 40px">
          <mj-column>
            <mj-text font-size="22px" font-weight="700" color="{THEME['primary']}" padding="0">
              Spot2Go
            </mj-text>
          </mj-column>
        </mj-section>
        <mj-section background-color="#ffffff" padding="16px 40px 16px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>
        {cta_section}
        <mj-section padding="20px">
          <mj-column>
            <mj-text align="center" font-size="12px" color="{THEME['text_muted']}">
              You're receiving this because you have an account with Spot2Go.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def password_reset_template(name: str, reset_link: str) -> str:
    content = f"""
        <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}">
          Reset Your Password
        </mj-text>
        <mj-text>Hi {html.escape(name or "there")},</mj-text>
        <mj-text>Please click the button below to reset your password.</mj-text>
        <mj-text color="{THEME['text_muted']}">
          This link will expire in 1 hour. If you didn't request this, please ignore this email.
        </mj-text>
    """
    return get_base_template(
        "Reset Your Spot2Go Password",
        "Reset your Spot2Go password",
        content,
        cta_url=reset_link,
        cta_label="Reset Password",
    )


def password_changed_template(name: str) -> str:
    content = f"""
        <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}">
          Your Password Has Been Changed
        </mj-text>
        <mj-text>Hi {html.escape(name or "there")},</mj-text>
        <mj-text>Your password for Spot2Go has been successfully changed.</mj-text>
        <mj-text color="{THEME['text_muted']}">
          If you did not make this change, please contact support immediately.
        </mj-text>
    """
    return get_base_template(
        "Your Spot2Go Password Has Been Changed", "Your password was changed", content
    )


def booking_confirmation_template(
    name: str,
    place_name: str,
    ticket_id: str,
    date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    booking_url: Optional[str] = None,
) -> str:
    schedule = ""
    if date:
        schedule = f"<mj-text>Date: <strong>{date}</strong></mj-text>"
        if start_time and end_time:
            schedule += f"<mj-text>Time: <strong>{start_time} - {end_time}</strong></mj-text>"

    content = f"""
        <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}">
          Booking Received for {html.escape(place_name)}
        </mj-text>
        <mj-text>Hi {html.escape(name or "there")},</mj-text>
        <mj-text>We've received your booking for <strong>{html.escape(place_name)}</strong>.</mj-text>
        {schedule}
        <mj-text>Ticket ID: <strong>{ticket_id}</strong></mj-text>
        <mj-text>See you there!</mj-text>
    """
    return get_base_template(
        f"Booking Received for {place_name}",
        f"Your Spot2Go ticket {ticket_id}",
        content,
        cta_url=booking_url,
        cta_label="View Booking" if booking_url else None,
    )
