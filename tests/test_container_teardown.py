"""Tests for container removal and the handle itself."""

from __future__ import annotations

import pytest
from conftest import FakeEngine

from shipyard.container import Container
from shipyard.engine import EngineClient
from shipyard.errors import ContainerConflictError, ContainerNotFoundError


class TestRemove:
    async def test_remove_is_not_forced(self, engine: FakeEngine):
        await Container(engine, "job-1").remove()
        assert engine.calls == [("remove", {"name": "job-1", "force": False})]

    async def test_force_remove_is_forced(self, engine: FakeEngine):
        await Container(engine, "job-1").force_remove()
        assert engine.calls == [("remove", {"name": "job-1", "force": True})]

    async def test_not_found_propagates(self, engine: FakeEngine):
        engine.remove_error = ContainerNotFoundError("No such container: job-1", status=404)

        with pytest.raises(ContainerNotFoundError) as exc_info:
            await Container(engine, "job-1").remove()

        assert exc_info.value is engine.remove_error

    async def test_conflict_propagates_without_retry(self, engine: FakeEngine):
        engine.remove_error = ContainerConflictError("container is running", status=409)

        with pytest.raises(ContainerConflictError):
            await Container(engine, "job-1").force_remove()

        assert engine.call_names() == ["remove"]


class TestHandle:
    def test_defaults_attach_both_streams(self, engine: FakeEngine):
        container = Container(engine, "job-1")
        assert container.name == "job-1"
        assert container.attach_stdout is True
        assert container.attach_stderr is True
        assert container.client is engine

    def test_handles_share_one_client(self, engine: FakeEngine):
        a = Container(engine, "a")
        b = Container(engine, "b", attach_stderr=False)
        assert a.client is b.client
        assert b.attach_stderr is False

    def test_name_is_read_only(self, engine: FakeEngine):
        container = Container(engine, "job-1")
        with pytest.raises(AttributeError):
            container.name = "other"  # type: ignore[misc]

    def test_repr(self, engine: FakeEngine):
        assert repr(Container(engine, "job-1")) == "Container(name='job-1')"

    def test_fake_satisfies_protocol(self, engine: FakeEngine):
        assert isinstance(engine, EngineClient)
