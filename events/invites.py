# events/invites.py
"""
Invite grants for joining an event.

Two ways in:
- a shared link token per role (LinkInvite row, one per event)
- a personal HMAC-SHA256 signature over "event|user|role"
"""
import hashlib
import hmac
from typing import Optional

from django.conf import settings

from .models import LinkInvite, Participant


# Invite role (query value) -> participant group
ROLE_MAP = {
    "presenter": Participant.GROUP_PRESENTER,
    "guest": Participant.GROUP_GUEST,
    "committee": Participant.GROUP_COMMITTEE,
}


def sign_invite(event_id, user_id, role: str) -> str:
    payload = f"{event_id}|{user_id}|{role}"
    return hmac.new(
        settings.INVITE_SECRET.encode(),
        payload.encode(),
        hashlib.sha256,
    ).hexdigest()


def verify_invite(event_id, user_id, role: str, signature: str) -> bool:
    if not signature:
        return False
    expected = sign_invite(event_id, user_id, role)
    return hmac.compare_digest(expected, signature)


def get_or_create_link_invite(event) -> LinkInvite:
    link_invite, _ = LinkInvite.objects.get_or_create(event=event)
    return link_invite


def token_for_role(link_invite: LinkInvite, role: str) -> str:
    field = f"{role}_token"
    return str(getattr(link_invite, field))


def resolve_token_role(event, token: str) -> Optional[str]:
    """Invite role a link token grants for this event, or None."""
    link_invite = LinkInvite.objects.filter(event=event).first()
    if link_invite is None or not token:
        return None
    for role in ROLE_MAP:
        if token_for_role(link_invite, role) == str(token):
            return role
    return None
