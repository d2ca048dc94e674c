"""
Unit tests for license command and query handlers.
"""

import asyncio

import pytest

from core.domain.exceptions import (
    InvalidCountError,
    LicenseAlreadyActiveError,
    LicenseNotFoundError,
    StoreError,
)
from core.domain.value_objects import ReactivationPolicy
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.generate_licenses import GenerateLicensesCommand
from licenses.application.handlers.activate_license_handler import ActivateLicenseHandler
from licenses.application.handlers.generate_licenses_handler import GenerateLicensesHandler
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.application.queries.verify_license import VerifyLicenseQuery
from licenses.domain.events import LicenseActivated, LicensesGenerated
from licenses.domain.license import License


async def _stored(store, license):
    await store.insert([license])
    return license


@pytest.mark.asyncio
class TestGenerateLicensesHandler:
    """Tests for GenerateLicensesHandler."""

    async def test_generate(self, license_store, recording_bus):
        handler = GenerateLicensesHandler(license_store, max_batch_size=10, event_bus=recording_bus)

        result = await handler.handle(GenerateLicensesCommand(count=4))

        assert result.count == 4
        assert sorted(result.keys) == sorted(license_store.records)
        events = recording_bus.of_type(LicensesGenerated)
        assert len(events) == 1
        assert events[0].license_keys == tuple(result.keys)

    async def test_invalid_count_publishes_nothing(self, license_store, recording_bus):
        handler = GenerateLicensesHandler(license_store, max_batch_size=10, event_bus=recording_bus)

        with pytest.raises(InvalidCountError):
            await handler.handle(GenerateLicensesCommand(count=11))

        assert recording_bus.published == []


@pytest.mark.asyncio
class TestActivateLicenseHandler:
    """Tests for ActivateLicenseHandler."""

    async def test_activate_inactive_license(self, license_store, recording_bus):
        """Test inactive -> active transition."""
        license = await _stored(license_store, License.pre_issue(email="a@b.com"))
        handler = ActivateLicenseHandler(license_store, event_bus=recording_bus)

        result = await handler.handle(ActivateLicenseCommand(key=license.key))

        assert result.success is True
        assert result.license.active is True
        assert result.license.activated_at is not None
        stored = await license_store.find_by_key(license.key)
        assert stored.active is True
        assert stored.activated_at == result.license.activated_at
        assert len(recording_bus.of_type(LicenseActivated)) == 1

    async def test_unknown_key(self, license_store, recording_bus):
        handler = ActivateLicenseHandler(license_store, event_bus=recording_bus)

        with pytest.raises(LicenseNotFoundError):
            await handler.handle(ActivateLicenseCommand(key="0" * 32))

        assert license_store.records == {}

    async def test_reactivation_noop_policy(self, license_store, recording_bus):
        """Under noop an active license is returned unchanged."""
        license = await _stored(license_store, License.issue(email="a@b.com"))
        handler = ActivateLicenseHandler(
            license_store, reactivation_policy=ReactivationPolicy.NOOP, event_bus=recording_bus
        )

        result = await handler.handle(ActivateLicenseCommand(key=license.key))

        assert result.success is True
        assert result.license.active is True
        assert result.license.activated_at is None
        assert recording_bus.published == []

    async def test_reactivation_conflict_policy(self, license_store, recording_bus):
        """Under conflict an active license is rejected and left untouched."""
        license = await _stored(license_store, License.pre_issue())
        handler = ActivateLicenseHandler(
            license_store, reactivation_policy="conflict", event_bus=recording_bus
        )
        first = await handler.handle(ActivateLicenseCommand(key=license.key))

        with pytest.raises(LicenseAlreadyActiveError):
            await handler.handle(ActivateLicenseCommand(key=license.key))

        stored = await license_store.find_by_key(license.key)
        assert stored.activated_at == first.license.activated_at

    async def test_concurrent_activation_single_transition(self, license_store, recording_bus):
        """Concurrent activations agree on one activated_at and never corrupt the record."""
        license = await _stored(license_store, License.pre_issue())
        handler = ActivateLicenseHandler(license_store, event_bus=recording_bus)

        results = await asyncio.gather(
            *(handler.handle(ActivateLicenseCommand(key=license.key)) for _ in range(5))
        )

        stored = await license_store.find_by_key(license.key)
        assert stored.active is True
        assert stored.activated_at is not None
        assert {r.license.activated_at for r in results} == {stored.activated_at}
        assert len(recording_bus.of_type(LicenseActivated)) == 1

    async def test_concurrent_activation_conflict_policy(self, license_store, recording_bus):
        license = await _stored(license_store, License.pre_issue())
        handler = ActivateLicenseHandler(
            license_store, reactivation_policy=ReactivationPolicy.CONFLICT, event_bus=recording_bus
        )

        results = await asyncio.gather(
            *(handler.handle(ActivateLicenseCommand(key=license.key)) for _ in range(3)),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, LicenseAlreadyActiveError)]
        assert len(successes) == 1
        assert len(failures) == 2

    async def test_store_failure_on_update(self, license_store, recording_bus):
        license = await _stored(license_store, License.pre_issue())
        license_store.fail_updates = True
        handler = ActivateLicenseHandler(license_store, event_bus=recording_bus)

        with pytest.raises(StoreError):
            await handler.handle(ActivateLicenseCommand(key=license.key))

        stored = await license_store.find_by_key(license.key)
        assert stored.active is False
        assert recording_bus.published == []


@pytest.mark.asyncio
class TestVerifyLicenseHandler:
    """Tests for VerifyLicenseHandler."""

    async def test_unknown_key_is_invalid(self, license_store):
        result = await VerifyLicenseHandler(license_store).handle(VerifyLicenseQuery(key="nope"))

        assert result.valid is False
        assert result.active is None
        assert result.license is None

    async def test_known_key(self, license_store):
        license = await _stored(license_store, License.pre_issue(email="a@b.com"))

        result = await VerifyLicenseHandler(license_store).handle(
            VerifyLicenseQuery(key=license.key)
        )

        assert result.valid is True
        assert result.active is False
        assert result.license.key == license.key

    async def test_verify_does_not_mutate(self, license_store):
        license = await _stored(license_store, License.pre_issue())

        await VerifyLicenseHandler(license_store).handle(VerifyLicenseQuery(key=license.key))

        assert await license_store.find_by_key(license.key) == license
