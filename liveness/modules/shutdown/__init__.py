"""Shutdown coordination for draining the listener on termination signals."""

from .coordinator import CoordinatorState, ShutdownCoordinator

__all__ = ['CoordinatorState', 'ShutdownCoordinator']
