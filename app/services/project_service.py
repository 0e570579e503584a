import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Conflict, Forbidden, NotFound
from app.models.projects import Application, Project
from app.models.users import Company, Influencer
from app.schemas.notifications import NotificationType
from app.schemas.projects import ProjectCreate, ProjectStatus
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)


def create_project(db: Session, company: Company, payload: ProjectCreate) -> Project:
    if payload.end_date <= payload.start_date:
        raise BadRequest("End date must be after start date")
    if payload.start_date < date.today():
        raise BadRequest("Start date cannot be in the past")

    project = Project(
        company_id=company.id,
        title=payload.title.strip(),
        description=payload.description.strip(),
        category=payload.category.strip(),
        budget=payload.budget,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Company %s created project %s", company.id, project.id)
    return project


def get_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    return project


def list_company_projects(db: Session, company: Company) -> list[Project]:
    projects = db.execute(
        select(Project)
        .where(Project.company_id == company.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    ).scalars()
    return list(projects)


def apply_to_project(
    db: Session,
    influencer: Influencer,
    project_id: int,
    message: str | None,
    proposed_price: int | None,
) -> Application:
    project = get_project(db, project_id)
    if project.status != ProjectStatus.pending:
        raise BadRequest("Project is no longer accepting applications")
    if project.end_date < date.today():
        raise BadRequest("Project has already ended")

    duplicate = db.execute(
        select(Application.id).where(
            Application.project_id == project.id,
            Application.influencer_id == influencer.id,
        )
    ).first()
    if duplicate:
        raise Conflict("Already applied to this project")

    application = Application(
        project_id=project.id,
        influencer_id=influencer.id,
        company_id=project.company_id,
        message=message,
        proposed_price=proposed_price,
    )
    db.add(application)
    create_notification(
        db,
        project.company.user_id,
        NotificationType.application_received,
        "New application",
        f"{influencer.display_name} applied to {project.title}.",
        {"project_id": project.id, "influencer_id": influencer.id},
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Already applied to this project")
    db.refresh(application)
    return application


def list_my_applications(db: Session, influencer: Influencer) -> list[Application]:
    applications = db.execute(
        select(Application)
        .where(Application.influencer_id == influencer.id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    ).scalars()
    return list(applications)


def list_applications_for_company(db: Session, company: Company) -> list[Application]:
    applications = db.execute(
        select(Application)
        .where(Application.company_id == company.id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    ).scalars()
    return list(applications)


def _get_owned_application(
    db: Session, company: Company, application_id: int
) -> Application:
    application = db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")
    if application.company_id != company.id:
        raise Forbidden("Not allowed to manage this application")
    return application


def accept_application(db: Session, company: Company, application_id: int) -> Application:
    application = _get_owned_application(db, company, application_id)
    if application.is_accepted:
        raise BadRequest("Application is already accepted")
    project = application.project
    if project.status != ProjectStatus.pending:
        raise BadRequest("Project is not open for matching")

    application.is_accepted = True
    project.status = ProjectStatus.matched
    project.matched_influencer_id = application.influencer_id

    influencer_user_id = application.influencer.user_id
    create_notification(
        db,
        influencer_user_id,
        NotificationType.application_accepted,
        "Application accepted",
        f"Your application to {project.title} was accepted.",
        {"project_id": project.id, "application_id": application.id},
    )
    create_notification(
        db,
        influencer_user_id,
        NotificationType.project_matched,
        "Project matched",
        f"You have been matched with {project.title}.",
        {"project_id": project.id},
    )
    db.commit()
    db.refresh(application)
    logger.info(
        "Project %s matched with influencer %s via application %s",
        project.id,
        application.influencer_id,
        application.id,
    )
    return application


def reject_application(db: Session, company: Company, application_id: int) -> None:
    application = _get_owned_application(db, company, application_id)
    if application.is_accepted:
        raise BadRequest("Cannot reject an accepted application")
    db.delete(application)
    db.commit()
