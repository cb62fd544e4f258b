"""
Per-page state for the web UI.

One ViewerState per browser tab: the current configuration, the session
that owns geometry and results, and the URL of the GLB currently shown.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from projection_config import ProjectionConfig
from session import ProjectionSession


@dataclass
class ViewerState:
    """Root page state."""

    config: ProjectionConfig = field(default_factory=ProjectionConfig)
    session: Optional[ProjectionSession] = None
    glb_url: Optional[str] = None
    running: bool = False
    pending: bool = False   # config changed while a recompute was running
    error: Optional[str] = None
    rotation: float = 0.0   # auto-rotate angle around the vertical axis, rad
    spinner: Optional[Any] = None  # scene group turned by the auto-rotate timer
