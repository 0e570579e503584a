import logging
import sys

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import (
    admin,
    auth,
    chapter1,
    chat,
    companies,
    invoices,
    notifications,
    onboarding,
    projects,
    scouts,
    sns,
)
from app.core.config import get_settings, lifespan
from app.core.database import engine, ping_database
from app.core.errors import (
    ServiceError,
    service_error_handler,
    validation_error_handler,
)
from app.models import Base

root = logging.getLogger()
if not root.handlers:  # don't double-add in reloads
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(h)

root.setLevel(logging.INFO)

settings = get_settings()

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Influencer Marketplace API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(chapter1.router)
app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(admin.router)
app.include_router(onboarding.router)
app.include_router(projects.router)
app.include_router(scouts.router)
app.include_router(invoices.router)
app.include_router(notifications.router)
app.include_router(chat.router)
app.include_router(sns.router)


@app.get("/health", tags=["health"])
def health_check():
    """Report service status and confirm database connectivity."""
    database_status = "ok" if ping_database() else "error"
    return {
        "status": "ok",
        "database": database_status,
    }
