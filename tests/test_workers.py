"""Tests for the viewer's background recompute loop."""
import asyncio

import pytest

pytest.importorskip("nicegui")

from projection_config import ProjectionConfig
from ui import workers
from ui.state import ViewerState


@pytest.fixture
def inline_io_bound(monkeypatch):
    """Run io_bound jobs inline on the event loop."""
    async def _io_bound(func, *args):
        return func(*args)

    monkeypatch.setattr(workers.run, "io_bound", _io_bound)


class TestRefreshProjection:

    def test_publishes_url(self, monkeypatch, inline_io_bound):
        monkeypatch.setattr(
            workers, "_do_projection", lambda session, config, store: "cube_a.glb",
        )
        state = ViewerState(session=object())
        notified = []

        asyncio.run(workers.refresh_projection(state, None, lambda: notified.append(1)))

        assert state.glb_url == f"{workers.SERVE_PREFIX}/cube_a.glb"
        assert state.error is None
        assert not state.running
        assert notified == [1]

    def test_pending_change_survives_failure(self, monkeypatch, inline_io_bound):
        state = ViewerState(session=object())
        newer = ProjectionConfig(tiling=4)
        seen = []

        def _flaky(session, config, store):
            seen.append(config)
            if len(seen) == 1:
                # a slider moved while this recompute was running
                state.config = newer
                state.pending = True
                raise RuntimeError("export failed")
            return "cube_b.glb"

        monkeypatch.setattr(workers, "_do_projection", _flaky)
        asyncio.run(workers.refresh_projection(state, None, lambda: None))

        assert seen == [ProjectionConfig(), newer]
        assert state.glb_url == f"{workers.SERVE_PREFIX}/cube_b.glb"
        assert state.error is None
        assert not state.pending
        assert not state.running

    def test_failure_is_reported(self, monkeypatch, inline_io_bound):
        def _broken(session, config, store):
            raise RuntimeError("disk full")

        monkeypatch.setattr(workers, "_do_projection", _broken)
        state = ViewerState(session=object(), glb_url="/projections/old.glb")
        asyncio.run(workers.refresh_projection(state, None, lambda: None))

        assert state.error == "disk full"
        assert state.glb_url == "/projections/old.glb"
        assert not state.running

    def test_concurrent_call_is_coalesced(self):
        state = ViewerState(session=object(), running=True)
        asyncio.run(workers.refresh_projection(state, None, lambda: None))
        assert state.pending
