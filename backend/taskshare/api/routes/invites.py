"""Invite Routes — send an invitation, preview it from the registration form.

Invariants:
    - The token is delivered only by email, never returned to the inviter
    - Email delivery runs as a background task; its failure never changes the
      response
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.api.dependencies import get_current_user, get_notification_sink
from taskshare.config import Settings, get_settings
from taskshare.core.invitations import build_invite_link, compose_invite_email
from taskshare.infrastructure.database import get_db
from taskshare.infrastructure.email_sender import deliver_in_background
from taskshare.models.user import User
from taskshare.schemas.invite import InviteCreate, InvitePreview, InviteResponse
from taskshare.services.invitation_ledger import InvitationLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invites", tags=["invites"])


@router.post(
    "", response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_invite(
    body: InviteCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    sink=Depends(get_notification_sink),
    settings: Settings = Depends(get_settings),
):
    person, token = await InvitationLedger(db).issue_invite(
        user.email, body.name, body.email,
    )
    subject, html_body = compose_invite_email(
        person.name, user.name, build_invite_link(settings.app_base_url, token),
    )
    background_tasks.add_task(
        deliver_in_background, sink, person.email, subject, html_body,
    )
    return InviteResponse(name=person.name, email=person.email)


@router.get("/{token}", response_model=InvitePreview)
async def preview_invite(token: str, db: AsyncSession = Depends(get_db)):
    person = await InvitationLedger(db).redeem_invite(token)
    return InvitePreview(name=person.name, email=person.email)
