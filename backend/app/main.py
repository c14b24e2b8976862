# Renewal tracker backend entrypoint: FastAPI app wiring.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import attachments
from backend.app.api import customers
from backend.app.api import dashboard
from backend.app.api import login
from backend.app.api import notification_preferences
from backend.app.api import notifications
from backend.app.api import renewals
from backend.app.api import users
from backend.app.core.dev_seed import ensure_default_dev_users
from backend.app.core.errors import register_exception_handlers
from backend.app.core.logging import configure_logging
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine

configure_logging()
settings = get_settings()

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(login.router)
app.include_router(users.router)
app.include_router(customers.router)
app.include_router(renewals.router)
app.include_router(attachments.router)
app.include_router(notifications.router)
app.include_router(notification_preferences.router)
app.include_router(dashboard.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_default_dev_users():
    db = SessionLocal()
    try:
        ensure_default_dev_users(db)
    finally:
        db.close()
