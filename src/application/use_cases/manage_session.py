"""
Session use cases.

Register, log in, log out and restore the active session, keeping the
workspace in step: whenever a user becomes active their collections are
seeded (first time only) and loaded into the workspace.
"""

from src.application.dto.requests import LoginRequest, RegisterRequest
from src.config import get_logger
from src.core.entities import User, Workspace
from src.core.exceptions import StorageReadError
from src.core.services import CollectionGateway, IdentityService

logger = get_logger(__name__)


async def load_workspace(
    gateway: CollectionGateway, workspace: Workspace, user: User | None
) -> Workspace:
    """
    Point the workspace at user and load their collections.

    With no user the workspace is cleared and nothing is read. Each
    collection loads on its own: one that cannot be decoded is recorded in
    workspace.load_errors and left unloaded, while the user stays logged in
    and the other collections are served.
    """
    workspace.clear()
    if user is None:
        return workspace

    scope = user.id
    await gateway.seed(scope)
    workspace.user = user

    loaders = {
        "products": gateway.load_products,
        "customers": gateway.load_customers,
        "invoices": gateway.load_invoices,
        "units": gateway.load_units,
    }
    for name, load in loaders.items():
        try:
            setattr(workspace, name, await load(scope))
        except StorageReadError as e:
            workspace.load_errors[name] = {
                "key": str(e.details["key"]),
                "reason": str(e.details["reason"]),
            }
            logger.error(
                "collection_unreadable",
                scope=scope,
                collection=name,
                reason=e.details["reason"],
            )

    logger.info(
        "workspace_loaded",
        scope=scope,
        products=len(workspace.products),
        customers=len(workspace.customers),
        invoices=len(workspace.invoices),
        unreadable=sorted(workspace.load_errors),
    )
    return workspace


class RestoreSessionUseCase:
    """Load the workspace of whoever was logged in when the app last ran."""

    def __init__(self, identity: IdentityService, gateway: CollectionGateway):
        self._identity = identity
        self._gateway = gateway

    async def execute(self, workspace: Workspace) -> User | None:
        user = await self._identity.get_current_user()
        await load_workspace(self._gateway, workspace, user)
        logger.info("session_restored", authenticated=user is not None)
        return user


class RegisterUseCase:
    """Create an account, log it in and load its seeded workspace."""

    def __init__(self, identity: IdentityService, gateway: CollectionGateway):
        self._identity = identity
        self._gateway = gateway

    async def execute(self, workspace: Workspace, request: RegisterRequest) -> User:
        user = await self._identity.register(
            request.email, request.password, request.shop_name
        )
        await load_workspace(self._gateway, workspace, user)
        return user


class LoginUseCase:
    """Log in and load the user's workspace."""

    def __init__(self, identity: IdentityService, gateway: CollectionGateway):
        self._identity = identity
        self._gateway = gateway

    async def execute(self, workspace: Workspace, request: LoginRequest) -> User:
        user = await self._identity.login(request.email, request.password)
        await load_workspace(self._gateway, workspace, user)
        return user


class LogoutUseCase:
    """End the session and empty the workspace."""

    def __init__(self, identity: IdentityService, gateway: CollectionGateway):
        self._identity = identity
        self._gateway = gateway

    async def execute(self, workspace: Workspace) -> None:
        await self._identity.logout()
        await load_workspace(self._gateway, workspace, None)
