from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger

from scribe.api.schemas import Credentials, ok
from scribe.users import UserRegistry

SESSION_USER_KEY = "username"


def get_current_user(request: Request) -> str:
    """Resolve the user from the signed session cookie."""
    username = request.session.get(SESSION_USER_KEY)
    if not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return username


def _start_session(request: Request, username: str) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = username


def get_auth_router(user_registry: UserRegistry) -> APIRouter:
    router = APIRouter(prefix="/api/auth")

    @router.post("/register")
    def register(request: Request, credentials: Credentials):
        if not user_registry.register_user(credentials.username, credentials.password):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Username already exists"
            )
        _start_session(request, credentials.username)
        return ok({"user": {"username": credentials.username}})

    @router.post("/login")
    def login(request: Request, credentials: Credentials):
        if not user_registry.login_user(credentials.username, credentials.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
            )
        _start_session(request, credentials.username)
        logger.info(f"User {credentials.username} logged in")
        return ok({"user": {"username": credentials.username}})

    @router.post("/logout")
    async def logout(request: Request):
        request.session.clear()
        return ok({"loggedOut": True})

    @router.get("/me")
    async def me(username: str = Depends(get_current_user)):  # noqa: B008
        return ok({"user": {"username": username}})

    return router
