"""Tests for the session check in front of admin operations."""

from datetime import timedelta

import pytest

from linkstash.access import AccessGate
from linkstash.errors import UnauthorizedError

TTL = timedelta(minutes=10)


@pytest.fixture
def gate(registry):
    return AccessGate(registry, TTL)


@pytest.mark.asyncio
class TestAccessGate:
    """Test AccessGate."""

    async def test_runs_operation_for_valid_session(self, gate, registry):
        token = registry.create(TTL).token

        async def operation(a, b=0):
            return a + b

        assert await gate.call(token, operation, 2, b=3) == 5

    async def test_plain_function_result(self, gate, registry):
        token = registry.create(TTL).token
        assert await gate.call(token, lambda: "done") == "done"

    @pytest.mark.parametrize("token", [None, "", "forged-token"])
    async def test_rejects_without_running(self, gate, token):
        """The operation is never invoked for a bad token."""
        calls = []

        async def operation():
            calls.append(1)

        with pytest.raises(UnauthorizedError):
            await gate.call(token, operation)
        assert calls == []

    async def test_rejects_expired_session(self, gate, registry, clock):
        token = registry.create(TTL).token
        clock.advance(TTL.total_seconds() + 1)

        with pytest.raises(UnauthorizedError):
            gate.check(token)

    async def test_rejects_revoked_session(self, gate, registry):
        token = registry.create(TTL).token
        registry.revoke(token)

        with pytest.raises(UnauthorizedError):
            gate.check(token)

    async def test_success_renews_session(self, gate, registry, clock):
        token = registry.create(TTL).token
        clock.advance(300)

        gate.check(token)
        assert registry.expires_at(token) == clock.now + TTL

    async def test_operation_errors_propagate(self, gate, registry):
        token = registry.create(TTL).token

        async def operation():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await gate.call(token, operation)
