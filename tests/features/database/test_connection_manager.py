"""Tests for the connection manager."""

import asyncio

import pytest

from hotel_tenancy.core.exceptions import DatabaseUnavailableError
from hotel_tenancy.features.database.repositories.connection_manager import ConnectionManager
from hotel_tenancy.features.hotel.repositories import BillRepository, TenantModels


@pytest.fixture
def manager(settings, pool_factory, registry_factory):
    return ConnectionManager(settings, pool_factory=pool_factory, registry_factory=registry_factory)


class TestMainConnection:

    @pytest.mark.asyncio
    async def test_main_connection_is_idempotent(self, manager, pool_factory):
        first, second = await asyncio.gather(manager.main_connection(), manager.main_connection())
        third = await manager.main_connection()

        assert first is second is third
        assert pool_factory.opens_for(None) == 1

    @pytest.mark.asyncio
    async def test_registry_is_bound_after_connect(self, manager, registry):
        assert await manager.registry() is registry
        assert manager.stats().main_connected is True

    @pytest.mark.asyncio
    async def test_main_connection_failure(self, manager, pool_factory):
        pool_factory.failing.add(None)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            await manager.main_connection()

        assert exc_info.value.database_name == "registry"
        assert manager.stats().main_connected is False


class TestTenantConnection:

    @pytest.mark.asyncio
    async def test_opens_tenant_database_by_naming_rule(self, manager):
        handle = await manager.tenant_connection("Alpha")

        assert handle.tenant_id == "alpha"
        assert handle.database_name == "tenant_alpha"
        assert handle.pool.database == "tenant_alpha"
        assert isinstance(handle.models, TenantModels)
        assert isinstance(handle.models.bills, BillRepository)
        assert handle.is_live

    @pytest.mark.asyncio
    async def test_live_handle_is_reused(self, manager, pool_factory):
        first = await manager.tenant_connection("alpha")
        second = await manager.tenant_connection("alpha")

        assert first is second
        assert pool_factory.opens_for("tenant_alpha") == 1

    @pytest.mark.asyncio
    async def test_concurrent_opens_share_one_pool(self, manager, pool_factory):
        pool_factory.gate = asyncio.Event()
        waiters = [asyncio.create_task(manager.tenant_connection("alpha")) for _ in range(5)]
        await asyncio.sleep(0)

        assert manager.stats().opening == 1
        pool_factory.gate.set()
        handles = await asyncio.gather(*waiters)

        assert len({id(h) for h in handles}) == 1
        assert pool_factory.opens_for("tenant_alpha") == 1

    @pytest.mark.asyncio
    async def test_failed_open_is_not_cached(self, manager, pool_factory):
        pool_factory.failing.add("tenant_beta")

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            await manager.tenant_connection("beta")
        assert exc_info.value.database_name == "tenant_beta"
        assert manager.get_open_connection("beta") is None
        assert manager.stats().opening == 0

        pool_factory.failing.clear()
        handle = await manager.tenant_connection("beta")
        assert handle.is_live

    @pytest.mark.asyncio
    async def test_failed_model_registration_closes_pool(self, settings, pool_factory):
        def broken_builder(pool):
            raise RuntimeError("schema mismatch")

        manager = ConnectionManager(settings, pool_factory=pool_factory, model_builder=broken_builder)

        with pytest.raises(DatabaseUnavailableError):
            await manager.tenant_connection("alpha")

        assert pool_factory.opened[-1].closed is True
        assert manager.stats().open_tenant_count == 0

    @pytest.mark.asyncio
    async def test_dead_handle_is_reopened(self, manager, pool_factory):
        first = await manager.tenant_connection("alpha")
        await first.pool.close()

        second = await manager.tenant_connection("alpha")

        assert second is not first
        assert second.is_live
        assert pool_factory.opens_for("tenant_alpha") == 2

    @pytest.mark.asyncio
    async def test_rejects_invalid_identifier(self, manager):
        with pytest.raises(ValueError):
            await manager.tenant_connection("../etc")


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_stats(self, manager):
        await manager.main_connection()
        await manager.tenant_connection("alpha")
        await manager.tenant_connection("beta")

        stats = manager.stats()
        data = stats.to_dict()

        assert stats.open_tenant_count == 2
        assert data["main_connected"] is True
        assert {t["database_name"] for t in data["tenants"]} == {"tenant_alpha", "tenant_beta"}

    @pytest.mark.asyncio
    async def test_close_tenant_connection(self, manager):
        handle = await manager.tenant_connection("alpha")

        assert await manager.close_tenant_connection("alpha") is True
        assert await manager.close_tenant_connection("alpha") is False
        assert handle.pool.closed is True

    @pytest.mark.asyncio
    async def test_close_all(self, manager, pool_factory):
        await manager.main_connection()
        await manager.tenant_connection("alpha")
        await manager.tenant_connection("beta")

        await manager.close_all()

        assert all(pool.closed for pool in pool_factory.opened)
        stats = manager.stats()
        assert stats.main_connected is False
        assert stats.open_tenant_count == 0

    @pytest.mark.asyncio
    async def test_close_all_discards_open_in_flight(self, manager, pool_factory):
        pool_factory.gate = asyncio.Event()
        opening = asyncio.create_task(manager.tenant_connection("alpha"))
        await asyncio.sleep(0)

        await manager.close_all()
        pool_factory.gate.set()

        with pytest.raises(DatabaseUnavailableError):
            await opening
        assert pool_factory.opens_for("tenant_alpha") == 1
        assert pool_factory.opened[0].closed is True
        assert manager.get_open_connection("alpha") is None
        assert manager.stats().open_tenant_count == 0

    @pytest.mark.asyncio
    async def test_reopens_after_close_all(self, manager, pool_factory):
        await manager.tenant_connection("alpha")
        await manager.close_all()

        handle = await manager.tenant_connection("alpha")

        assert handle.is_live
        assert pool_factory.opens_for("tenant_alpha") == 2
