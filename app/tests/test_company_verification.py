import pytest
from sqlalchemy import select

from app.core.errors import NotFound
from app.models.notifications import Notification
from app.models.users import Company, User
from app.models.verification import VerificationDocument, VerificationRecord
from app.schemas.documents import DocumentDescriptor, DocumentStatus, DocumentType
from app.schemas.notifications import NotificationType
from app.schemas.users import (
    CompanyStatus,
    UserStatus,
    VerificationRecordStatus,
    VerificationType,
)
from app.services import company_verification_service

DOCUMENTS = [
    {
        "document_type": "BUSINESS_REGISTRATION",
        "document_url": "https://files.example.com/registration.pdf",
        "file_name": "registration.pdf",
        "file_size": 2048,
    },
    {
        "document_type": "ID_DOCUMENT",
        "document_url": "https://files.example.com/id.png",
        "file_name": "id.png",
        "file_size": 1024,
    },
]


def _submit(db_session, company_user):
    return company_verification_service.submit_verification_documents(
        db_session,
        company_user.company.id,
        [DocumentDescriptor(**doc) for doc in DOCUMENTS],
    )


def test_submit_documents_marks_account_pending(client, company_user, headers_for, db_session):
    response = client.post(
        "/api/companies/me/verification",
        json={"documents": DOCUMENTS},
        headers=headers_for(company_user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "VERIFICATION_PENDING"
    assert body["is_verified"] is False
    assert {doc["status"] for doc in body["documents"]} == {"PENDING"}
    assert len(body["documents"]) == 2

    db_session.refresh(company_user)
    assert company_user.status == UserStatus.verification_pending


def test_submit_documents_for_missing_company_raises(db_session):
    with pytest.raises(NotFound):
        company_verification_service.submit_verification_documents(
            db_session, 9999, [DocumentDescriptor(**DOCUMENTS[0])]
        )


def test_influencer_cannot_use_company_verification(client, influencer_user, headers_for):
    response = client.get(
        "/api/companies/me/verification", headers=headers_for(influencer_user)
    )

    assert response.status_code == 403


def test_approve_company_verifies_everything_at_once(
    client, db_session, company_user, admin_user, headers_for
):
    _submit(db_session, company_user)
    company_id = company_user.company.id

    response = client.put(
        f"/api/admin/companies/{company_id}/approve", headers=headers_for(admin_user)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "VERIFIED"
    assert response.json()["is_verified"] is True

    db_session.expire_all()
    company = company_user.company
    assert company.is_verified is True
    assert company.verified_at is not None
    assert company.status == CompanyStatus.verified
    assert company_user.status == UserStatus.verified

    statuses = db_session.execute(
        select(VerificationDocument.status).where(
            VerificationDocument.company_id == company_id
        )
    ).scalars()
    assert set(statuses) == {DocumentStatus.approved}

    record = db_session.execute(
        select(VerificationRecord).where(
            VerificationRecord.user_id == company_user.id,
            VerificationRecord.type == VerificationType.business,
        )
    ).scalar_one()
    assert record.status == VerificationRecordStatus.approved

    notification = db_session.execute(
        select(Notification).where(Notification.user_id == company_user.id)
    ).scalar_one()
    assert notification.type == NotificationType.verification_approved


def test_reject_company_reverts_user_to_provisional(db_session, company_user):
    _submit(db_session, company_user)
    assert company_user.status == UserStatus.verification_pending

    company_verification_service.reject_company_verification(
        db_session, company_user.company.id, "Blurry scan"
    )

    db_session.expire_all()
    assert company_user.status == UserStatus.provisional
    assert company_user.company.status == CompanyStatus.provisional
    documents = company_user.company.verification_documents
    assert {doc.status for doc in documents} == {DocumentStatus.rejected}
    assert {doc.rejection_reason for doc in documents} == {"Blurry scan"}


def test_reject_company_reverts_even_a_verified_user(db_session, company_user):
    _submit(db_session, company_user)
    company_verification_service.approve_company_verification(
        db_session, company_user.company.id
    )

    company_verification_service.reject_company_verification(
        db_session, company_user.company.id, "Registration expired"
    )

    db_session.expire_all()
    assert company_user.status == UserStatus.provisional
    assert company_user.company.is_verified is False


def test_pending_list_is_admin_only_and_oldest_first(
    client, db_session, company_user, admin_user, make_company_user, headers_for
):
    second = make_company_user("second@example.com", "Second Co")
    _submit(db_session, company_user)
    company_verification_service.submit_verification_documents(
        db_session,
        second.company.id,
        [
            DocumentDescriptor(
                document_type=DocumentType.business_registration,
                document_url="https://files.example.com/second.pdf",
                file_name="second.pdf",
                file_size=100,
            )
        ],
    )

    forbidden = client.get(
        "/api/admin/companies/pending", headers=headers_for(company_user)
    )
    assert forbidden.status_code == 403

    response = client.get("/api/admin/companies/pending", headers=headers_for(admin_user))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [c["company_name"] for c in body["companies"]] == ["Acme Inc", "Second Co"]


def _notification_store_down(*args, **kwargs):
    raise RuntimeError("notification store unavailable")


def _stored_state(db_session, company_user) -> dict:
    db_session.expire_all()
    company = db_session.execute(
        select(Company).where(Company.user_id == company_user.id)
    ).scalar_one()
    record = db_session.execute(
        select(VerificationRecord).where(
            VerificationRecord.user_id == company_user.id,
            VerificationRecord.type == VerificationType.business,
        )
    ).scalar_one_or_none()
    return {
        "is_verified": company.is_verified,
        "company_status": company.status,
        "user_status": db_session.execute(
            select(User.status).where(User.id == company_user.id)
        ).scalar_one(),
        "documents": set(
            db_session.execute(
                select(VerificationDocument.status).where(
                    VerificationDocument.company_id == company.id
                )
            ).scalars()
        ),
        "business_record": None if record is None else record.status,
        "notifications": db_session.execute(
            select(Notification.type).where(Notification.user_id == company_user.id)
        ).scalars().all(),
    }


def test_approve_leaves_nothing_behind_when_notification_fails(
    db_session, company_user, monkeypatch
):
    _submit(db_session, company_user)
    before = _stored_state(db_session, company_user)
    monkeypatch.setattr(
        company_verification_service, "create_notification", _notification_store_down
    )

    # A commit inside the service would release this savepoint.
    savepoint = db_session.begin_nested()
    with pytest.raises(RuntimeError):
        company_verification_service.approve_company_verification(
            db_session, company_user.company.id
        )
    savepoint.rollback()

    after = _stored_state(db_session, company_user)
    assert after == before
    assert after["is_verified"] is False
    assert after["user_status"] == UserStatus.verification_pending
    assert after["documents"] == {DocumentStatus.pending}
    assert after["business_record"] is None


def test_reject_leaves_approval_intact_when_notification_fails(
    db_session, company_user, monkeypatch
):
    _submit(db_session, company_user)
    company_verification_service.approve_company_verification(
        db_session, company_user.company.id
    )
    before = _stored_state(db_session, company_user)
    monkeypatch.setattr(
        company_verification_service, "create_notification", _notification_store_down
    )

    savepoint = db_session.begin_nested()
    with pytest.raises(RuntimeError):
        company_verification_service.reject_company_verification(
            db_session, company_user.company.id, "Registration expired"
        )
    savepoint.rollback()

    after = _stored_state(db_session, company_user)
    assert after == before
    assert after["is_verified"] is True
    assert after["user_status"] == UserStatus.verified
    assert after["documents"] == {DocumentStatus.approved}
    assert after["business_record"] == VerificationRecordStatus.approved
