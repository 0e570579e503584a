import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("FRONTEND_URL", "https://frontend.local")
os.environ.setdefault("AWS_S3_BUCKET", "test-bucket")
os.environ.setdefault("AWS_REGION", "ap-northeast-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from collections.abc import Generator  # noqa: E402

import boto3  # noqa: E402
import pytest  # noqa: E402
from botocore.config import Config  # noqa: E402
from botocore.stub import Stubber  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.core.aws import get_s3_client  # noqa: E402
from app.core.database import Base, build_engine, get_db  # noqa: E402
from app.core.security import hash_password, issue_access_token  # noqa: E402
from app.main import app  # noqa: E402
from app.models.users import Company, Influencer, User  # noqa: E402
from app.schemas.users import UserRole  # noqa: E402

DEFAULT_PASSWORD = "Secret123"


@pytest.fixture(scope="session")
def engine():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session]:
    connection = engine.connect()
    trans = connection.begin()

    TestingSessionLocal = sessionmaker(
        bind=connection, autoflush=False, expire_on_commit=False, future=True
    )
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture
def s3_stub() -> Generator[tuple[object, Stubber]]:
    s3_client = boto3.client(
        "s3",
        region_name="ap-northeast-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        config=Config(signature_version="s3v4"),
    )
    with Stubber(s3_client) as stubber:
        yield s3_client, stubber


@pytest.fixture
def client(db_session, s3_stub) -> Generator[TestClient]:
    # Override FastAPI's get_db to use our testing session
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    s3_client, _ = s3_stub
    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_s3_client] = lambda: s3_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def create_company_user(
    db: Session,
    email: str = "company@example.com",
    company_name: str = "Acme Inc",
) -> User:
    user = User(
        email=email,
        role=UserRole.company,
        password_hash=hash_password(DEFAULT_PASSWORD),
    )
    db.add(user)
    db.flush()
    db.add(Company(user_id=user.id, company_name=company_name))
    db.commit()
    db.refresh(user)
    return user


def create_influencer_user(
    db: Session,
    email: str = "influencer@example.com",
    display_name: str = "Mika",
) -> User:
    user = User(
        email=email,
        role=UserRole.influencer,
        password_hash=hash_password(DEFAULT_PASSWORD),
    )
    db.add(user)
    db.flush()
    db.add(Influencer(user_id=user.id, display_name=display_name))
    db.commit()
    db.refresh(user)
    return user


def create_admin_user(db: Session, email: str = "admin@example.com") -> User:
    user = User(email=email, role=UserRole.admin, password_hash=None)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    token = issue_access_token(user.id, str(user.role), user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def company_user(db_session) -> User:
    return create_company_user(db_session)


@pytest.fixture
def influencer_user(db_session) -> User:
    return create_influencer_user(db_session)


@pytest.fixture
def admin_user(db_session) -> User:
    return create_admin_user(db_session)


@pytest.fixture
def auth_client(client, company_user) -> tuple[TestClient, User]:
    token = issue_access_token(company_user.id, str(company_user.role), company_user.email)
    client.cookies.set("access_token", token, path="/")
    return client, company_user


@pytest.fixture
def make_company_user(db_session):
    def _make(email: str, company_name: str = "Acme Inc") -> User:
        return create_company_user(db_session, email, company_name)

    return _make


@pytest.fixture
def make_influencer_user(db_session):
    def _make(email: str, display_name: str = "Mika") -> User:
        return create_influencer_user(db_session, email, display_name)

    return _make


@pytest.fixture
def headers_for():
    return auth_headers
