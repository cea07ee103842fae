from typing import List, Set

from seatkeeper.app.services.invitation_mailer import (
    DispatchError,
    IInvitationMailer,
    InvitationEmail,
)


class FakeInvitationMailer(IInvitationMailer):
    """Records sent emails; addresses in fail_for raise DispatchError"""

    def __init__(self, fail_for: Set[str] = None):
        self.fail_for = set(fail_for or ())
        self.sent: List[InvitationEmail] = []

    async def send_invitation(self, email: InvitationEmail) -> None:
        if email.invitee_email in self.fail_for:
            raise DispatchError("Domain not verified")
        self.sent.append(email)

    def token_for(self, invitee_email: str) -> str:
        for email in reversed(self.sent):
            if email.invitee_email == invitee_email:
                return email.token
        raise KeyError(invitee_email)
