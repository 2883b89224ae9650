"""Tests for the session use cases."""

import pytest

from src.application.dto.requests import LoginRequest, RegisterRequest
from src.application.use_cases import (
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
    RestoreSessionUseCase,
    load_workspace,
)
from src.core.entities import Product, User, Workspace
from src.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    StorageReadError,
)
from src.core.services import CollectionGateway, IdentityService
from src.core.services.persistence import Collection
from src.infrastructure.storage import InMemoryKeyValueStore


@pytest.fixture
def identity(gateway: CollectionGateway) -> IdentityService:
    return IdentityService(gateway, hash_iterations=1000)


@pytest.fixture
def register_request() -> RegisterRequest:
    return RegisterRequest(email="a@b.com", password="pw", shop_name="Acme")


class TestRegisterUseCase:
    async def test_new_user_gets_seeded_workspace(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        user = await RegisterUseCase(identity, gateway).execute(workspace, register_request)

        assert workspace.user == user
        assert workspace.scope == user.id
        assert len(workspace.products) == 3
        assert len(workspace.customers) == 2
        assert workspace.invoices == []
        assert workspace.units == ["pcs", "hrs", "kg", "lb", "box", "service"]

    async def test_duplicate_leaves_workspace(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        use_case = RegisterUseCase(identity, gateway)
        first = await use_case.execute(workspace, register_request)

        with pytest.raises(DuplicateEmailError):
            await use_case.execute(workspace, register_request)
        assert workspace.user == first


class TestLoginUseCase:
    async def test_login_loads_own_collections(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        user = await RegisterUseCase(identity, gateway).execute(workspace, register_request)
        await gateway.store_products(user.id, [Product(id="p", name="Only", price=1)])
        await LogoutUseCase(identity, gateway).execute(workspace)

        await LoginUseCase(identity, gateway).execute(
            workspace, LoginRequest(email="a@b.com", password="pw")
        )

        assert workspace.user.id == user.id
        assert [p.name for p in workspace.products] == ["Only"]

    async def test_users_are_isolated(self, identity: IdentityService, gateway: CollectionGateway):
        workspace = Workspace()
        register = RegisterUseCase(identity, gateway)
        first = await register.execute(
            workspace, RegisterRequest(email="a@b.com", password="pw", shop_name="A")
        )
        await gateway.store_customers(first.id, [])

        await register.execute(
            workspace, RegisterRequest(email="c@d.com", password="pw", shop_name="C")
        )
        assert len(workspace.customers) == 2

    async def test_wrong_password_keeps_no_session(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        await RegisterUseCase(identity, gateway).execute(workspace, register_request)
        await LogoutUseCase(identity, gateway).execute(workspace)

        with pytest.raises(InvalidCredentialsError):
            await LoginUseCase(identity, gateway).execute(
                workspace, LoginRequest(email="a@b.com", password="nope")
            )
        assert workspace.user is None
        assert await gateway.get_session() is None


class TestLogoutUseCase:
    async def test_clears_workspace(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        await RegisterUseCase(identity, gateway).execute(workspace, register_request)
        await LogoutUseCase(identity, gateway).execute(workspace)

        assert workspace.user is None
        assert workspace.products == []
        assert workspace.scope == "public"


class TestRestoreSessionUseCase:
    async def test_restores_previous_session(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        register_request: RegisterRequest,
    ):
        user = await RegisterUseCase(identity, gateway).execute(Workspace(), register_request)

        workspace = Workspace()
        restored = await RestoreSessionUseCase(identity, gateway).execute(workspace)

        assert restored.id == user.id
        assert workspace.user.id == user.id
        assert len(workspace.products) == 3

    async def test_no_session(self, identity: IdentityService, gateway: CollectionGateway):
        workspace = Workspace()
        assert await RestoreSessionUseCase(identity, gateway).execute(workspace) is None
        assert workspace.is_authenticated is False


class TestLoadWorkspace:
    async def test_none_user_reads_nothing(self, gateway: CollectionGateway, workspace: Workspace):
        await load_workspace(gateway, workspace, None)
        assert workspace.user is None
        assert workspace.products == []

    async def test_unreadable_collection_is_isolated(
        self,
        gateway: CollectionGateway,
        kv_store: InMemoryKeyValueStore,
        sample_user: User,
    ):
        await kv_store.set(gateway.key_for(Collection.INVOICES, sample_user.id), "{corrupt")

        workspace = await load_workspace(gateway, Workspace(), sample_user)

        assert workspace.is_authenticated
        assert len(workspace.products) == 3
        assert len(workspace.customers) == 2
        assert workspace.invoices == []
        assert set(workspace.load_errors) == {"invoices"}
        workspace.ensure_readable("products", "customers", "units")
        with pytest.raises(StorageReadError) as exc_info:
            workspace.ensure_readable("products", "invoices")
        assert exc_info.value.details["key"] == f"novabill_{sample_user.id}_invoices"

    async def test_load_errors_cleared_on_reload(
        self,
        gateway: CollectionGateway,
        kv_store: InMemoryKeyValueStore,
        sample_user: User,
    ):
        key = gateway.key_for(Collection.UNITS, sample_user.id)
        await kv_store.set(key, '"not a list"')
        workspace = await load_workspace(gateway, Workspace(), sample_user)
        assert set(workspace.load_errors) == {"units"}

        await kv_store.delete(key)
        await load_workspace(gateway, workspace, sample_user)
        assert workspace.load_errors == {}
        assert workspace.units == ["pcs", "hrs", "kg", "lb", "box", "service"]


class TestUnreadableCollectionsOnLogin:
    async def test_login_keeps_session_and_other_collections(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        kv_store: InMemoryKeyValueStore,
        register_request: RegisterRequest,
    ):
        workspace = Workspace()
        user = await RegisterUseCase(identity, gateway).execute(workspace, register_request)
        await LogoutUseCase(identity, gateway).execute(workspace)
        await kv_store.set(gateway.key_for(Collection.INVOICES, user.id), "{corrupt")

        await LoginUseCase(identity, gateway).execute(
            workspace, LoginRequest(email="a@b.com", password="pw")
        )

        assert (await gateway.get_session()).id == user.id
        assert workspace.user.id == user.id
        assert len(workspace.products) == 3
        assert list(workspace.load_errors) == ["invoices"]

    async def test_restore_does_not_raise(
        self,
        identity: IdentityService,
        gateway: CollectionGateway,
        kv_store: InMemoryKeyValueStore,
        register_request: RegisterRequest,
    ):
        user = await RegisterUseCase(identity, gateway).execute(Workspace(), register_request)
        await kv_store.set(gateway.key_for(Collection.PRODUCTS, user.id), "[1, 2")

        workspace = Workspace()
        restored = await RestoreSessionUseCase(identity, gateway).execute(workspace)

        assert restored.id == user.id
        assert list(workspace.load_errors) == ["products"]
        assert len(workspace.customers) == 2
