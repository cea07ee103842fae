from abc import ABC, abstractmethod
from dataclasses import dataclass


class DispatchError(Exception):
    """The invitation email could not be handed to the email provider"""


@dataclass(frozen=True)
class InvitationEmail:
    invitee_email: str
    inviter_name: str
    inviter_email: str
    role: str
    token: str


def build_accept_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/accept-invitation/{token}"


class IInvitationMailer(ABC):
    @abstractmethod
    async def send_invitation(self, email: InvitationEmail) -> None:
        """Send the magic-link email. Raises DispatchError on failure."""
        pass
