"""Tests for the in-memory simulated controller."""

import pytest

from gboxrun.control.controller import AppController
from gboxrun.control.simulated import SimulatedController


class TestSimulatedController:
    """Tests for SimulatedController."""

    def test_satisfies_controller_protocol(self, simulated: SimulatedController) -> None:
        assert isinstance(simulated, AppController)

    def test_first_configuration_selected(self, simulated: SimulatedController) -> None:
        assert simulated.selected_configuration == "app"

    def test_defaults_to_app_configuration(self) -> None:
        assert SimulatedController().list_configurations() == ["app"]

    @pytest.mark.asyncio
    async def test_start_records_process(self, simulated: SimulatedController) -> None:
        result = await simulated.start()

        assert result.success is True
        assert result.message == "Android app started successfully"
        assert result.configuration_name == "app"
        assert simulated.running_processes == [("app", "run")]

    @pytest.mark.asyncio
    async def test_debug_records_debug_process(self, simulated: SimulatedController) -> None:
        result = await simulated.debug()

        assert result.message == "Android app debug session started successfully"
        assert simulated.running_processes == [("app", "debug")]

    @pytest.mark.asyncio
    async def test_stop_with_nothing_running(self, simulated: SimulatedController) -> None:
        result = await simulated.stop()

        assert result.success is False
        assert result.message == "No running processes found"

    @pytest.mark.asyncio
    async def test_stop_clears_processes(self, simulated: SimulatedController) -> None:
        await simulated.start()
        await simulated.debug()

        result = await simulated.stop()

        assert result.success is True
        assert result.message == "Stopped 2 running process(es)"
        assert simulated.running_processes == []

    @pytest.mark.asyncio
    async def test_start_without_configurations(self) -> None:
        controller = SimulatedController([])

        result = await controller.start()

        assert result.success is False
        assert result.message == "No run configuration selected"

    def test_select_known_configuration(self, simulated: SimulatedController) -> None:
        result = simulated.select_configuration("benchmark")

        assert result.success is True
        assert result.message == "Configuration 'benchmark' selected"
        assert simulated.selected_configuration == "benchmark"

    def test_select_unknown_configuration(self, simulated: SimulatedController) -> None:
        result = simulated.select_configuration("missing")

        assert result.success is False
        assert result.message == "Android configuration 'missing' not found"
        assert simulated.selected_configuration == "app"

    @pytest.mark.asyncio
    async def test_started_configuration_follows_selection(
        self, simulated: SimulatedController
    ) -> None:
        simulated.select_configuration("benchmark")

        result = await simulated.start()

        assert result.configuration_name == "benchmark"


class TestProjectPath:
    """Requests naming another project are rejected."""

    @pytest.mark.asyncio
    async def test_matching_or_absent_project_accepted(self) -> None:
        controller = SimulatedController(project_path="/work/app")

        assert (await controller.start("/work/app")).success is True
        assert (await controller.start(None)).success is True

    @pytest.mark.asyncio
    async def test_other_project_rejected(self) -> None:
        controller = SimulatedController(project_path="/work/app")

        start = await controller.start("/elsewhere")
        stop = await controller.stop("/elsewhere")
        select = controller.select_configuration("app", "/elsewhere")

        for result in (start, stop, select):
            assert result.success is False
            assert result.message == "Project not found or not open"
        assert controller.list_configurations("/elsewhere") == []

    @pytest.mark.asyncio
    async def test_unconfigured_project_accepts_any_path(self) -> None:
        controller = SimulatedController()

        assert (await controller.start("/anything")).success is True
