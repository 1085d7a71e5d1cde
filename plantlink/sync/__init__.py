"""
State synchronization: the controller that owns the device configuration and
the dispatcher that turns prompt property values into replies.
"""
from plantlink.sync.controller import ControllerState, PropertyNames, SynchronizationController
from plantlink.sync.dispatcher import DispatcherState, RequestDispatcher

__all__ = [
    "ControllerState",
    "PropertyNames",
    "SynchronizationController",
    "DispatcherState",
    "RequestDispatcher",
]
