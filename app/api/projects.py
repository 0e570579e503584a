from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_company, get_current_influencer, get_current_user
from app.core.database import get_db
from app.models.projects import Application, Project
from app.models.users import Company, Influencer, User
from app.schemas.projects import (
    ApplicationCreate,
    ApplicationOut,
    ProjectCreate,
    ProjectOut,
)
from app.services import project_service

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> Project:
    return project_service.create_project(db, company, payload)


@router.get("/mine", response_model=list[ProjectOut])
def list_my_projects(
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> list[Project]:
    return project_service.list_company_projects(db, company)


@router.get("/applications/mine", response_model=list[ApplicationOut])
def list_my_applications(
    db: Session = Depends(get_db),
    influencer: Influencer = Depends(get_current_influencer),
) -> list[Application]:
    return project_service.list_my_applications(db, influencer)


@router.get("/applications/received", response_model=list[ApplicationOut])
def list_received_applications(
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> list[Application]:
    return project_service.list_applications_for_company(db, company)


@router.put("/applications/{application_id}/accept", response_model=ApplicationOut)
def accept_application(
    application_id: int,
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> Application:
    return project_service.accept_application(db, company, application_id)


@router.delete(
    "/applications/{application_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def reject_application(
    application_id: int,
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> Response:
    project_service.reject_application(db, company, application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> Project:
    return project_service.get_project(db, project_id)


@router.post(
    "/{project_id}/apply",
    response_model=ApplicationOut,
    status_code=status.HTTP_201_CREATED,
)
def apply_to_project(
    project_id: int,
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    influencer: Influencer = Depends(get_current_influencer),
) -> Application:
    return project_service.apply_to_project(
        db, influencer, project_id, payload.message, payload.proposed_price
    )
