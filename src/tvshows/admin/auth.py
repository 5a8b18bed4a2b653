"""SQLAdmin authentication backend."""

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from tvshows.api.auth import credentials_valid


class AdminAuth(AuthenticationBackend):
    """Session login using the same credentials as the HTTP API."""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        ok = credentials_valid(
            str(form.get("username") or ""),
            str(form.get("password") or ""),
        )
        if ok:
            request.session.update({"authenticated": True})
        return ok

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("authenticated", False)
