"""Tool registry and the Android lifecycle tools.

Each tool is a name, a description, a JSON-schema parameter shape, and an
async handler taking the ``arguments`` mapping from ``tools/call``. Handlers
answer with a single MCP text content block whose first character tells
the agent at a glance whether the call worked.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from gboxrun.control.controller import AppController, StatusReporter
from gboxrun.control.rerun import DEFAULT_GRACE_PERIOD, rerun_app
from gboxrun.core.errors import GboxError
from gboxrun.core.types import ExecutionResult
from gboxrun.mcp.protocol import InvalidParamsError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

OK = "✅"
FAIL = "❌"
BUG = "🐛"
PHONE = "📱"
BULLET = "•"

PROJECT_PATH_SCHEMA = {
    "type": "string",
    "description": "Optional path to the Android project",
}


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described operation exposed through ``tools/call``."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler
    annotations: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Shape used in the ``tools/list`` result."""
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
        if self.annotations:
            data["annotations"] = self.annotations
        return data


class ToolRegistry:
    """Static name -> ToolDescriptor table, filled once at startup."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(self, tool: ToolDescriptor) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[dict[str, Any]]:
        return [tool.to_dict() for tool in self._tools.values()]

    async def call(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Invoke the named tool.

        Raises:
            InvalidParamsError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise InvalidParamsError(f"Unknown tool: {name}")
        return await tool.handler(arguments)


def make_tool_result(text: str) -> dict[str, Any]:
    """Create a tools/call result with one text block."""
    return {"content": [{"type": "text", "text": text}]}


def _string_arg(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    return value if isinstance(value, str) else None


def _configuration_suffix(result: ExecutionResult) -> str:
    if result.configuration_name:
        return f"\nConfiguration: {result.configuration_name}"
    return ""


def _schema(*, require_configuration: bool = False) -> dict[str, Any]:
    if not require_configuration:
        return {"type": "object", "properties": {"projectPath": PROJECT_PATH_SCHEMA}}
    return {
        "type": "object",
        "properties": {
            "configurationName": {
                "type": "string",
                "description": "Name of the configuration to select",
            },
            "projectPath": PROJECT_PATH_SCHEMA,
        },
        "required": ["configurationName"],
    }


def _annotations(title: str, *, read_only: bool = False) -> dict[str, Any]:
    return {"title": title, "readOnlyHint": read_only, "openWorldHint": True}


class AndroidTools:
    """Tool handlers bound to one app controller."""

    def __init__(
        self,
        controller: AppController,
        rerun_grace_period: float = DEFAULT_GRACE_PERIOD,
    ) -> None:
        self._controller = controller
        self._rerun_grace_period = rerun_grace_period

    async def start(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await self._controller.start(_string_arg(arguments, "projectPath"))
        except GboxError as e:
            return make_tool_result(f"{FAIL} Error starting Android app: {e.message}")
        if result.success:
            return make_tool_result(
                f"{OK} Android app started successfully: {result.message}"
                + _configuration_suffix(result)
            )
        return make_tool_result(f"{FAIL} Failed to start Android app: {result.message}")

    async def stop(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await self._controller.stop(_string_arg(arguments, "projectPath"))
        except GboxError as e:
            return make_tool_result(f"{FAIL} Error stopping Android app: {e.message}")
        if result.success:
            return make_tool_result(f"{OK} Android app stopped successfully: {result.message}")
        return make_tool_result(f"{FAIL} Failed to stop Android app: {result.message}")

    async def rerun(self, arguments: dict[str, Any]) -> dict[str, Any]:
        result = await rerun_app(
            self._controller,
            _string_arg(arguments, "projectPath"),
            self._rerun_grace_period,
        )
        if result.success:
            return make_tool_result(
                f"{OK} Android app rerun successful: {result.message}"
                + _configuration_suffix(result)
            )
        return make_tool_result(f"{FAIL} Failed to rerun Android app: {result.message}")

    async def debug(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await self._controller.debug(_string_arg(arguments, "projectPath"))
        except GboxError as e:
            return make_tool_result(f"{FAIL} Error starting debug session: {e.message}")
        if result.success:
            return make_tool_result(
                f"{BUG} Android app debug session started: {result.message}"
                + _configuration_suffix(result)
            )
        return make_tool_result(f"{FAIL} Failed to start debug session: {result.message}")

    async def configurations(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            configurations = await asyncio.to_thread(
                self._controller.list_configurations,
                _string_arg(arguments, "projectPath"),
            )
        except GboxError as e:
            return make_tool_result(f"{FAIL} Failed to get configurations: {e.message}")
        lines = "\n".join(f"{BULLET} {name}" for name in configurations)
        return make_tool_result(
            f"{PHONE} Available Android configurations ({len(configurations)}):\n{lines}"
        )

    async def select(self, arguments: dict[str, Any]) -> dict[str, Any]:
        name = _string_arg(arguments, "configurationName")
        if not name:
            raise InvalidParamsError("Configuration name is required")
        try:
            result = await asyncio.to_thread(
                self._controller.select_configuration,
                name,
                _string_arg(arguments, "projectPath"),
            )
        except GboxError as e:
            return make_tool_result(f"{FAIL} Failed to select configuration: {e.message}")
        if result.success:
            return make_tool_result(f"{OK} Configuration selected: {result.message}")
        return make_tool_result(f"{FAIL} Failed to select configuration: {result.message}")


async def _api_status(reporter: StatusReporter) -> dict[str, Any]:
    try:
        api = await reporter.status()
    except GboxError as e:
        return make_tool_result(
            f"{FAIL} Android API server is not running or not accessible: {e.message}"
        )
    if api.success:
        return make_tool_result(f"{OK} Android API server is running: {api.message}")
    return make_tool_result(f"{FAIL} Android API server error: {api.message}")


def build_android_tools(
    controller: AppController,
    rerun_grace_period: float = DEFAULT_GRACE_PERIOD,
) -> ToolRegistry:
    """Register the Android lifecycle tools against ``controller``.

    The six lifecycle tools are always present. ``android_api_status`` is
    added only when the controller talks to a control plane it can query.
    """
    tools = AndroidTools(controller, rerun_grace_period)
    registry = ToolRegistry()
    registry.register(ToolDescriptor(
        name="android_start_app",
        description="Start the Android application in the current project",
        input_schema=_schema(),
        handler=tools.start,
        annotations=_annotations("Start Android App"),
    ))
    registry.register(ToolDescriptor(
        name="android_stop_app",
        description="Stop the currently running Android application",
        input_schema=_schema(),
        handler=tools.stop,
        annotations=_annotations("Stop Android App"),
    ))
    registry.register(ToolDescriptor(
        name="android_rerun_app",
        description="Rerun the Android application (stop and start)",
        input_schema=_schema(),
        handler=tools.rerun,
        annotations=_annotations("Rerun Android App"),
    ))
    registry.register(ToolDescriptor(
        name="android_debug_app",
        description="Start debugging the Android application",
        input_schema=_schema(),
        handler=tools.debug,
        annotations=_annotations("Debug Android App"),
    ))
    registry.register(ToolDescriptor(
        name="android_get_configurations",
        description="Get list of available Android run configurations",
        input_schema=_schema(),
        handler=tools.configurations,
        annotations=_annotations("Get Android Configurations", read_only=True),
    ))
    registry.register(ToolDescriptor(
        name="android_select_configuration",
        description="Select a specific Android run configuration",
        input_schema=_schema(require_configuration=True),
        handler=tools.select,
        annotations=_annotations("Select Android Configuration"),
    ))
    if isinstance(controller, StatusReporter):
        registry.register(ToolDescriptor(
            name="android_api_status",
            description="Check the status of the Android Studio plugin API server",
            input_schema={"type": "object", "properties": {}},
            handler=lambda arguments: _api_status(controller),
            annotations=_annotations("Android API Server Status", read_only=True),
        ))
    return registry
