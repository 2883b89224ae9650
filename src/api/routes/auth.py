"""Account and session endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_current_workspace,
    get_login_use_case,
    get_logout_use_case,
    get_register_use_case,
)
from src.application.dto.requests import LoginRequest, RegisterRequest
from src.application.dto.responses import (
    ErrorResponse,
    SessionStateResponse,
    UserResponse,
)
from src.application.use_cases import LoginUseCase, LogoutUseCase, RegisterUseCase
from src.core.entities import Workspace

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Email already exists"},
    },
)
async def register(
    request: RegisterRequest,
    workspace: Workspace = Depends(get_current_workspace),
    use_case: RegisterUseCase = Depends(get_register_use_case),
) -> UserResponse:
    """Create an account, log it in and load its starter catalog."""
    user = await use_case.execute(workspace, request)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
async def login(
    request: LoginRequest,
    workspace: Workspace = Depends(get_current_workspace),
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> UserResponse:
    """Log in and load the user's workspace."""
    user = await use_case.execute(workspace, request)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=SessionStateResponse)
async def logout(
    workspace: Workspace = Depends(get_current_workspace),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
) -> SessionStateResponse:
    """End the session."""
    await use_case.execute(workspace)
    return SessionStateResponse(authenticated=False)


@router.get("/me", response_model=SessionStateResponse)
async def current_user(
    workspace: Workspace = Depends(get_current_workspace),
) -> SessionStateResponse:
    """Who is logged in, if anyone."""
    if workspace.user is None:
        return SessionStateResponse(authenticated=False)
    return SessionStateResponse(
        authenticated=True,
        user=UserResponse.model_validate(workspace.user),
    )
