"""In-memory app controller.

Stands in for the IDE when the control plane runs outside an IDE host,
e.g. ``gboxrun serve`` or tests. It keeps the same messages the
IDE-backed controller reports so agents see identical text either way.
"""

from __future__ import annotations

import logging
import threading

from gboxrun.core.types import ExecutionResult

logger = logging.getLogger(__name__)


class SimulatedController:
    """Tracks run configurations and a set of fake running processes.

    Args:
        configurations: Run configuration names. The first one is selected.
        project_path: If set, only requests naming this project (or none)
            are accepted.
    """

    def __init__(
        self,
        configurations: list[str] | None = None,
        project_path: str | None = None,
    ) -> None:
        self._configurations = list(configurations) if configurations is not None else ["app"]
        self._project_path = project_path
        self._selected: str | None = self._configurations[0] if self._configurations else None
        self._processes: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    @property
    def selected_configuration(self) -> str | None:
        return self._selected

    @property
    def running_processes(self) -> list[tuple[str, str]]:
        """Snapshot of (configuration, mode) pairs currently "running"."""
        with self._lock:
            return list(self._processes)

    def _knows_project(self, project_path: str | None) -> bool:
        return (
            project_path is None
            or self._project_path is None
            or project_path == self._project_path
        )

    async def start(self, project_path: str | None = None) -> ExecutionResult:
        return self._launch(project_path, "run")

    async def debug(self, project_path: str | None = None) -> ExecutionResult:
        return self._launch(project_path, "debug")

    def _launch(self, project_path: str | None, mode: str) -> ExecutionResult:
        if not self._knows_project(project_path):
            return ExecutionResult(False, "Project not found or not open")

        with self._lock:
            selected = self._selected
            if selected is None:
                return ExecutionResult(False, "No run configuration selected")
            self._processes.append((selected, mode))

        logger.info("Simulated %s of configuration %s", mode, selected)
        if mode == "debug":
            return ExecutionResult(
                True, "Android app debug session started successfully", selected
            )
        return ExecutionResult(True, "Android app started successfully", selected)

    async def stop(self, project_path: str | None = None) -> ExecutionResult:
        if not self._knows_project(project_path):
            return ExecutionResult(False, "Project not found or not open")

        with self._lock:
            count = len(self._processes)
            self._processes.clear()

        if count == 0:
            return ExecutionResult(False, "No running processes found")
        return ExecutionResult(True, f"Stopped {count} running process(es)")

    def list_configurations(self, project_path: str | None = None) -> list[str]:
        if not self._knows_project(project_path):
            return []
        return list(self._configurations)

    def select_configuration(
        self, name: str, project_path: str | None = None
    ) -> ExecutionResult:
        if not self._knows_project(project_path):
            return ExecutionResult(False, "Project not found or not open")

        if name not in self._configurations:
            return ExecutionResult(False, f"Android configuration '{name}' not found")

        with self._lock:
            self._selected = name
        return ExecutionResult(True, f"Configuration '{name}' selected")
