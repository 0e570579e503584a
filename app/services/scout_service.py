"""
Scout invitations: a company invites one influencer to one of its projects.

A scout moves from PENDING to ACCEPTED or REJECTED exactly once. Accepting a
scout matches the project to the invited influencer; when several scouts of the
same project are accepted the most recent acceptance holds the match.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Conflict, Forbidden, NotFound
from app.core.timestamps import utcnow
from app.models.projects import Project, Scout
from app.models.users import Influencer, User
from app.schemas.notifications import NotificationType
from app.schemas.projects import ScoutStatus
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)


def send_scout_invitation(
    db: Session,
    user: User,
    project_id: int,
    influencer_id: int,
    message: str | None,
) -> Scout:
    company = user.company
    if company is None:
        raise Forbidden("Only companies can send scouts")

    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    if project.company_id != company.id:
        raise Forbidden("Not allowed to scout for this project")

    influencer = db.get(Influencer, influencer_id)
    if influencer is None:
        raise NotFound("Influencer not found")

    duplicate = db.execute(
        select(Scout.id).where(
            Scout.project_id == project.id,
            Scout.influencer_id == influencer.id,
        )
    ).first()
    if duplicate:
        raise Conflict("Influencer has already been scouted for this project")

    scout = Scout(
        project_id=project.id,
        influencer_id=influencer.id,
        company_id=company.id,
        message=message,
    )
    db.add(scout)
    create_notification(
        db,
        influencer.user_id,
        NotificationType.scout_received,
        "New scout",
        f"{company.company_name} invited you to {project.title}.",
        {"project_id": project.id, "company_id": company.id},
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Influencer has already been scouted for this project")
    db.refresh(scout)
    logger.info(
        "Company %s scouted influencer %s for project %s",
        company.id,
        influencer.id,
        project.id,
    )
    return scout


def _get_pending_invitation(db: Session, user: User, scout_id: int) -> Scout:
    scout = db.get(Scout, scout_id)
    if scout is None:
        raise NotFound("Scout not found")
    if user.influencer is None or scout.influencer_id != user.influencer.id:
        raise Forbidden("Not allowed to respond to this scout")
    if scout.status != ScoutStatus.pending:
        raise BadRequest("Scout has already been responded to")
    return scout


def accept_scout(db: Session, user: User, scout_id: int) -> Scout:
    scout = _get_pending_invitation(db, user, scout_id)
    project = scout.project

    scout.status = ScoutStatus.accepted
    scout.responded_at = utcnow()
    project.matched_influencer_id = scout.influencer_id

    create_notification(
        db,
        scout.company.user_id,
        NotificationType.scout_accepted,
        "Scout accepted",
        f"{scout.influencer.display_name} accepted your scout for {project.title}.",
        {"scout_id": scout.id, "project_id": project.id},
    )
    db.commit()
    db.refresh(scout)
    logger.info("Scout %s accepted; project %s matched", scout.id, project.id)
    return scout


def reject_scout(db: Session, user: User, scout_id: int, reason: str | None) -> Scout:
    scout = _get_pending_invitation(db, user, scout_id)

    scout.status = ScoutStatus.rejected
    scout.rejection_reason = reason
    scout.responded_at = utcnow()

    create_notification(
        db,
        scout.company.user_id,
        NotificationType.scout_rejected,
        "Scout declined",
        f"{scout.influencer.display_name} declined your scout for {scout.project.title}.",
        {"scout_id": scout.id, "project_id": scout.project_id, "reason": reason},
    )
    db.commit()
    db.refresh(scout)
    logger.info("Scout %s rejected", scout.id)
    return scout


def list_my_scout_invitations(
    db: Session, user: User, status: ScoutStatus | None = None
) -> list[Scout]:
    if user.influencer is None:
        raise Forbidden("Only influencers receive scouts")
    stmt = select(Scout).where(Scout.influencer_id == user.influencer.id)
    if status is not None:
        stmt = stmt.where(Scout.status == status)
    return list(
        db.execute(stmt.order_by(Scout.created_at.desc(), Scout.id.desc())).scalars()
    )


def list_my_sent_scouts(
    db: Session, user: User, status: ScoutStatus | None = None
) -> list[Scout]:
    if user.company is None:
        raise Forbidden("Only companies send scouts")
    stmt = select(Scout).where(Scout.company_id == user.company.id)
    if status is not None:
        stmt = stmt.where(Scout.status == status)
    return list(
        db.execute(stmt.order_by(Scout.created_at.desc(), Scout.id.desc())).scalars()
    )


def get_scout(db: Session, user: User, scout_id: int) -> Scout:
    scout = db.get(Scout, scout_id)
    if scout is None:
        raise NotFound("Scout not found")
    is_company = user.company is not None and scout.company_id == user.company.id
    is_influencer = (
        user.influencer is not None and scout.influencer_id == user.influencer.id
    )
    if not (is_company or is_influencer):
        raise Forbidden("Not allowed to view this scout")
    return scout
