"""
Background recompute for the web UI.

Uses NiceGUI's run.io_bound so projection and GLB export run on a worker
thread while the event loop keeps serving the page. The session publishes
each result atomically, so the page never sees a half-built UV buffer.
"""

import logging
from typing import Callable

from nicegui import run

from projection_config import ProjectionConfig
from session import ProjectionSession
from ui.scene_helpers import ProjectionAssetStore
from ui.state import ViewerState

logger = logging.getLogger(__name__)

SERVE_PREFIX = "/projections"


def _do_projection(
    session: ProjectionSession,
    config: ProjectionConfig,
    store: ProjectionAssetStore,
) -> str:
    result = session.update(config)
    return store.publish(result)


async def refresh_projection(
    state: ViewerState,
    store: ProjectionAssetStore,
    notify: Callable,
) -> None:
    """Recompute for ``state.config`` and publish the new GLB URL.

    Changes that arrive while a recompute is running are coalesced: the
    running task loops once more with the latest config, also when the
    recompute it just finished failed.
    """
    if state.running:
        state.pending = True
        return

    if state.session is None:
        state.session = ProjectionSession(state.config)

    state.running = True
    try:
        while True:
            state.pending = False
            config = state.config
            try:
                name = await run.io_bound(_do_projection, state.session, config, store)
            except Exception as exc:
                logger.exception("Projection failed")
                state.error = str(exc)
            else:
                state.glb_url = f"{SERVE_PREFIX}/{name}"
                state.error = None
            if not state.pending:
                break
    finally:
        state.running = False
        try:
            notify()
        except Exception as exc:
            logger.debug("Page refresh skipped (client gone?): %s", exc)
