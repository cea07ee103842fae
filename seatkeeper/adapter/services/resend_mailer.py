"""
Invitation mailer backed by the Resend HTTP API.
"""

import logging
from html import escape
from typing import Optional

import httpx

from seatkeeper.app.services.invitation_mailer import (
    DispatchError,
    IInvitationMailer,
    InvitationEmail,
    build_accept_url,
)

logger = logging.getLogger(__name__)


def render_subject(email: InvitationEmail, product_name: str) -> str:
    return f"You've been invited to join {email.inviter_name}'s team on {product_name}"


def render_html(email: InvitationEmail, accept_url: str, product_name: str) -> str:
    inviter_name = escape(email.inviter_name)
    inviter_email = escape(email.inviter_email)
    role = escape(email.role)
    product = escape(product_name)
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #16a34a; text-align: center;">You're Invited to Join a Team!</h2>
  <p style="font-size: 16px;"><strong>{inviter_name}</strong> has invited you to join their team on {product} as a <strong>{role}</strong>.</p>
  <div style="text-align: center; margin: 40px 0;">
    <a href="{accept_url}" style="background-color: #16a34a; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold;">Accept Invitation</a>
  </div>
  <p style="font-size: 14px;">New here? Clicking the button above will guide you through creating your account and joining the team.</p>
  <p style="font-size: 14px;">Or copy this link into your browser: {accept_url}</p>
  <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
  <p style="color: #666; font-size: 12px; text-align: center;">This invitation will expire in 7 days. If you have any questions, please contact {inviter_email}.</p>
</div>
"""


class ResendInvitationMailer(IInvitationMailer):
    """Sends invitation emails through Resend (POST /emails)"""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        app_base_url: str,
        product_name: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.app_base_url = app_base_url
        self.product_name = product_name
        self.timeout = timeout
        self.transport = transport

    async def send_invitation(self, email: InvitationEmail) -> None:
        if not self.api_key:
            raise DispatchError("RESEND_API_KEY not configured")

        accept_url = build_accept_url(self.app_base_url, email.token)
        payload = {
            "from": self.sender,
            "to": [email.invitee_email],
            "subject": render_subject(email, self.product_name),
            "html": render_html(email, accept_url, self.product_name),
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as exc:
            raise DispatchError(f"Email provider unreachable: {exc}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
            else:
                message = response.text or f"HTTP {response.status_code}"
            raise DispatchError(message)

        logger.info(f"Invitation email sent to {email.invitee_email}")
