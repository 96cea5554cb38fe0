"""Unit tests for LocationController."""

import pytest

from simroute.devices.location_controller import LocationController
from simroute.devices.simulation_set import ActiveSimulationSet
from simroute.routes.track_loader import Waypoint


WAYPOINTS = [Waypoint(33.8121, -117.919), Waypoint(33.8115, -117.9185), Waypoint(33.8109, -117.918)]


@pytest.fixture
def simulations():
    return ActiveSimulationSet()


@pytest.fixture
def location(mock_controller, simulations):
    return LocationController(mock_controller, simulations)


class TestSetPosition:

    @pytest.mark.asyncio
    async def test_issues_set_command(self, location, mock_controller):
        assert await location.set_position("SIM-A", 33.8121, -117.919) is True
        assert mock_controller.calls == [("set_location", "SIM-A", 33.8121, -117.919)]

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(self, mock_controller_factory, simulations):
        controller = mock_controller_factory(booted=["SIM-A"], fail_on=[("set_location", "SIM-A")])
        location = LocationController(controller, simulations)

        assert await location.set_position("SIM-A", 1.0, 2.0) is False
        assert len(simulations) == 0


class TestStartRoute:

    @pytest.mark.asyncio
    async def test_waypoints_passed_in_parse_order(self, location, mock_controller, simulations):
        shuffled = [WAYPOINTS[2], WAYPOINTS[0], WAYPOINTS[1]]

        assert await location.start_route("SIM-A", shuffled, 1.4, 1.0) is True

        assert mock_controller.calls == [("start_route", "SIM-A", shuffled, 1.4, 1.0)]
        assert "SIM-A" in simulations

    @pytest.mark.asyncio
    async def test_restart_stops_previous_route_exactly_once(self, location, mock_controller, simulations):
        await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)
        await location.start_route("SIM-A", WAYPOINTS, 5.0, 2.0)

        assert [call[0] for call in mock_controller.calls] == [
            "start_route",
            "clear_location",
            "start_route",
        ]
        assert mock_controller.calls[1] == ("clear_location", "SIM-A")
        assert mock_controller.calls[2][3:] == (5.0, 2.0)
        assert simulations.snapshot() == frozenset({"SIM-A"})

    @pytest.mark.asyncio
    async def test_first_start_does_not_stop(self, location, mock_controller):
        await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)

        assert mock_controller.calls_named("clear_location") == []

    @pytest.mark.asyncio
    async def test_other_devices_do_not_trigger_stop(self, location, mock_controller):
        await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)
        await location.start_route("SIM-B", WAYPOINTS, 20.0, 1.0)

        assert mock_controller.calls_named("clear_location") == []

    @pytest.mark.asyncio
    async def test_failed_start_is_not_tracked(self, mock_controller_factory, simulations):
        controller = mock_controller_factory(fail_on=[("start_route", "SIM-A")])
        location = LocationController(controller, simulations)

        assert await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0) is False
        assert "SIM-A" not in simulations

    @pytest.mark.asyncio
    async def test_failed_prior_stop_still_starts(self, mock_controller_factory, simulations):
        controller = mock_controller_factory(fail_on=[("clear_location", "SIM-A")])
        location = LocationController(controller, simulations)
        simulations.add("SIM-A")

        assert await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0) is True
        assert [call[0] for call in controller.calls] == ["clear_location", "start_route"]
        assert "SIM-A" in simulations


class TestStop:

    @pytest.mark.asyncio
    async def test_stop_removes_active_device(self, location, mock_controller, simulations):
        await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)

        assert await location.stop("SIM-A") is True
        assert "SIM-A" not in simulations
        assert mock_controller.calls[-1] == ("clear_location", "SIM-A")

    @pytest.mark.asyncio
    async def test_stop_without_active_route_is_safe(self, location, mock_controller, simulations):
        simulations.add("SIM-B")
        before = simulations.snapshot()

        assert await location.stop("SIM-A") is True
        assert simulations.snapshot() == before
        assert mock_controller.calls == [("clear_location", "SIM-A")]

    @pytest.mark.asyncio
    async def test_stop_twice(self, location, simulations):
        await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)

        assert await location.stop("SIM-A") is True
        assert await location.stop("SIM-A") is True
        assert len(simulations) == 0

    @pytest.mark.asyncio
    async def test_failed_stop_still_removes_entry(self, mock_controller_factory, simulations):
        controller = mock_controller_factory(fail_on=[("clear_location", "SIM-A")])
        location = LocationController(controller, simulations)
        simulations.add("SIM-A")

        assert await location.stop("SIM-A") is False
        assert "SIM-A" not in simulations


@pytest.mark.asyncio
async def test_default_simulation_set_is_created(mock_controller):
    location = LocationController(mock_controller)

    await location.start_route("SIM-A", WAYPOINTS, 20.0, 1.0)

    assert "SIM-A" in location.simulations
