"""Admin UI mounted under /admin."""

from fastapi import FastAPI
from sqladmin import Admin

from tvshows.admin.auth import AdminAuth
from tvshows.admin.views import (
    DistributorAdmin,
    ReleaseDateAdmin,
    SyncToolsView,
    TvShowAdmin,
)
from tvshows.config import settings
from tvshows.database import engine


def setup_admin(app: FastAPI) -> Admin:
    """Attach the SQLAdmin interface to an existing FastAPI app."""
    auth = AdminAuth(secret_key=settings.admin_secret_key)
    admin = Admin(app, engine, authentication_backend=auth, title="TV Shows Admin")
    for view in [TvShowAdmin, DistributorAdmin, ReleaseDateAdmin, SyncToolsView]:
        admin.add_view(view)
    return admin
