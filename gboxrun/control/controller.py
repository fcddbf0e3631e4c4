"""The app-controller contract consumed by both front ends.

An app controller owns the IDE-side run machinery: which run configuration
is selected, and how to launch, debug, or stop it. The front ends never
reach past this protocol.

Lifecycle operations (start/stop/debug) are coroutines because the real
work happens asynchronously on the host's UI thread. Listing and selecting
configurations are quick, blocking calls; front ends run them on a worker
thread so the event loop stays free.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gboxrun.core.types import ApiResponse, ExecutionResult


@runtime_checkable
class AppController(Protocol):
    """Backend capability for an Android app's run lifecycle."""

    async def start(self, project_path: str | None = None) -> ExecutionResult: ...

    async def stop(self, project_path: str | None = None) -> ExecutionResult: ...

    async def debug(self, project_path: str | None = None) -> ExecutionResult: ...

    def list_configurations(self, project_path: str | None = None) -> list[str]: ...

    def select_configuration(
        self, name: str, project_path: str | None = None
    ) -> ExecutionResult: ...


@runtime_checkable
class StatusReporter(Protocol):
    """A controller that can report on the control plane it talks to."""

    async def status(self) -> ApiResponse: ...
