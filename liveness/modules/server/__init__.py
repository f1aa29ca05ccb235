"""Liveness HTTP server: health responder, listener and its errors."""

from .config import ServerConfig
from .connections import ConnectionTracker, TrackedConnection
from .errors import BindFailure, PortInUse, ServerError, ShutdownTimeout
from .health import HealthResponse, create_app, health_handler
from .listener import Listener, ServerState, SHUTDOWN_DEADLINE

__all__ = [
    'ServerConfig',
    'ConnectionTracker',
    'TrackedConnection',
    'BindFailure',
    'PortInUse',
    'ServerError',
    'ShutdownTimeout',
    'HealthResponse',
    'create_app',
    'health_handler',
    'Listener',
    'ServerState',
    'SHUTDOWN_DEADLINE',
]
