"""Invitation Tokens — generation, shape checks and the invite email body.

Invariants:
    - Tokens carry INVITE_TOKEN_BYTES * 8 = 160 bits of entropy from `secrets`
    - Tokens are lower-case hex, exactly 2 * INVITE_TOKEN_BYTES characters
    - Invitee-supplied text is HTML-escaped before it reaches the email body
"""

import html
import re
import secrets
from urllib.parse import urlencode

INVITE_TOKEN_BYTES = 20
INVITE_SUBJECT = "You have a new invite!"

_TOKEN_SHAPE = re.compile(rf"^[0-9a-f]{{{INVITE_TOKEN_BYTES * 2}}}$")


def generate_invite_token() -> str:
    return secrets.token_hex(INVITE_TOKEN_BYTES)


def is_well_formed_token(token: str) -> bool:
    """Cheap shape check so garbage never reaches the database."""
    return isinstance(token, str) and bool(_TOKEN_SHAPE.match(token))


def build_invite_link(app_base_url: str, token: str) -> str:
    return f"{app_base_url.rstrip('/')}/register?{urlencode({'token': token})}"


def compose_invite_email(invitee_name: str, inviter: str, invite_link: str) -> tuple[str, str]:
    """Return (subject, html_body) for an invitation."""
    body = (
        f"<p>Hello <b>{html.escape(invitee_name)}</b>,</p>"
        f"<p>{html.escape(inviter)} has invited you to TaskShare!</p>"
        f'<p><a href="{html.escape(invite_link, quote=True)}">'
        "Click here to accept the invite</a></p>"
    )
    return INVITE_SUBJECT, body
