"""App lifecycle control: the backend contract and its implementations."""

from gboxrun.control.controller import AppController, StatusReporter
from gboxrun.control.remote import PluginApiController
from gboxrun.control.rerun import DEFAULT_GRACE_PERIOD, rerun_app
from gboxrun.control.simulated import SimulatedController

__all__ = [
    "DEFAULT_GRACE_PERIOD",
    "AppController",
    "PluginApiController",
    "SimulatedController",
    "StatusReporter",
    "rerun_app",
]
