"""
Tests for the waypoint engine and the lifecycle shared by all engines.
"""

import math
import unittest

from uavexec import config
from uavexec.cee import CeeState, CeeType, WaypointCEE
from uavexec.command import WaypointCommand
from uavexec.energy import Battery
from uavexec.errors import InvariantViolationError, MissingCommandError, PrematureQueryError
from uavexec.model import Estimate, FixedConsumptionProvider, FlightModel
from uavexec.nodes import UAVNode


def make_uav(x=0.0, y=0.0, z=0.0, rate=1.0, flight_model=None, provider=None):
    return UAVNode(
        x,
        y,
        z,
        battery=Battery(10_000),
        flight_model=flight_model or FlightModel(),
        consumption_provider=provider or FixedConsumptionProvider(rate),
        name="uav",
    )


def start(cee, now=0.0):
    cee.initialize(now)
    cee.perform_entry_actions(now)
    cee.set_node_parameters(now)
    return cee


class NegativeProvider:
    def draw(self, cee):
        return -1.0


class TestWaypointKinematics(unittest.TestCase):
    """Test angles and speed derived at initialisation."""

    def test_heading(self):
        """Yaw follows the horizontal direction, in [0, 360)."""
        cases = [((10, 0, 0), 0.0), ((0, 10, 0), 90.0), ((-10, 0, 0), 180.0), ((0, -10, 0), 270.0)]
        for target, yaw in cases:
            with self.subTest(target=target):
                cee = WaypointCEE(make_uav(), WaypointCommand(*target))
                cee.initialize(0)
                self.assertAlmostEqual(cee.yaw, yaw)

    def test_climb_angle_and_speed(self):
        """A 45 degree climb uses the interpolated speed and nose-down pitch."""
        uav = make_uav()
        cee = WaypointCEE(uav, WaypointCommand(10, 0, 10))
        cee.initialize(0)
        self.assertAlmostEqual(cee.climb_angle, 45.0)
        self.assertAlmostEqual(cee.pitch, -45.0)
        self.assertAlmostEqual(cee.speed, uav.get_speed(45.0))

    def test_initialize_does_not_touch_node(self):
        """Node parameters are only written at activation."""
        uav = make_uav()
        cee = WaypointCEE(uav, WaypointCommand(0, 10, 0))
        cee.initialize(0)
        self.assertEqual((uav.yaw, uav.speed), (0.0, 0.0))

        cee.set_node_parameters(0)
        self.assertAlmostEqual(uav.yaw, 90.0)
        self.assertEqual(uav.speed, 10.0)
        self.assertEqual(uav.climb_angle, 0.0)


class TestWaypointExecution(unittest.TestCase):
    """Test stepping, completion and forecasting."""

    def setUp(self):
        self.uav = make_uav(rate=2.0)
        self.cee = WaypointCEE(self.uav, WaypointCommand(30, 40, 0))

    def test_duration(self):
        """50 m at 10 m/s takes 5 s."""
        self.cee.initialize(0)
        self.assertAlmostEqual(self.cee.get_overall_duration(), 5.0)

    def test_pessimistic_duration(self):
        """The quantile duration uses the pessimistic speed."""
        self.cee.initialize(0)
        self.assertAlmostEqual(self.cee.get_overall_duration_quantile(), 50.0 / 8.0)
        self.assertGreater(self.cee.get_overall_duration_quantile(), self.cee.get_overall_duration())

    def test_remaining_time_decreases(self):
        """Remaining time shrinks by one second per one-second slice."""
        start(self.cee)
        remaining = [self.cee.get_remaining_time()]
        for _ in range(4):
            self.cee.update_state(1.0)
            remaining.append(self.cee.get_remaining_time())
        for expected, actual in zip([5.0, 4.0, 3.0, 2.0, 1.0], remaining):
            self.assertAlmostEqual(actual, expected)

    def test_completion_is_monotonic(self):
        """Completion flips once, then stays."""
        start(self.cee)
        results = []
        for t in range(1, 8):
            if self.cee.is_command_completed(t - 1) is False:
                self.cee.update_state(1.0)
            results.append(self.cee.is_command_completed(t))
        self.assertEqual(results, [False, False, False, False, True, True, True])
        self.assertEqual(self.uav.position, (30.0, 40.0, 0.0))

    def test_climbing_segment_in_partial_slices(self):
        """A climb follows the straight line and ends on the target after its duration."""
        target = (30.0, 40.0, 50.0)
        cee = WaypointCEE(self.uav, WaypointCommand(*target))
        start(cee)
        length = math.dist((0.0, 0.0, 0.0), target)
        duration = cee.get_overall_duration()
        self.assertAlmostEqual(duration, length / cee.speed)

        cee.update_state(0.75)
        cee.update_state(0.75)
        travelled = cee.speed * 1.5
        for axis, end in enumerate(target):
            self.assertAlmostEqual(self.uav.position[axis], travelled * end / length)
        self.assertFalse(cee.is_command_completed(1.5))

        elapsed = 1.5
        while duration - elapsed > 0.75:
            cee.update_state(0.75)
            elapsed += 0.75
        cee.update_state(duration - elapsed)

        for axis, end in enumerate(target):
            self.assertAlmostEqual(self.uav.position[axis], end, delta=config.EPSILON)
        self.assertTrue(cee.is_command_completed(duration))

    def test_final_slice_lands_on_target(self):
        """An overshooting slice stops exactly at the target."""
        cee = WaypointCEE(self.uav, WaypointCommand(25, 0, 0))
        start(cee)
        for _ in range(3):
            cee.update_state(1.0)
        self.assertEqual(self.uav.position, (25.0, 0.0, 0.0))
        self.assertTrue(cee.is_command_completed(3))

    def test_discharge_per_slice(self):
        """Each slice discharges rate times step."""
        start(self.cee)
        self.cee.update_state(1.5)
        self.assertAlmostEqual(float(self.uav.battery.remaining), 10_000 - 3.0)

    def test_probable_consumption(self):
        """Level flight draws the model's horizontal rate."""
        self.cee.initialize(0)
        self.assertAlmostEqual(self.cee.get_probable_consumption(), 5.0)
        self.assertAlmostEqual(self.cee.get_probable_consumption(normalized=False), 25.0)
        self.assertGreater(
            self.cee.get_probable_consumption(normalized=False, from_method=Estimate.QUANTILE), 25.0
        )

    def test_zero_length_waypoint(self):
        """A waypoint at the current position is complete and costs nothing."""
        cee = WaypointCEE(self.uav, WaypointCommand(0, 0, 0))
        start(cee)
        self.assertEqual(cee.get_overall_duration(), 0.0)
        self.assertEqual(cee.get_probable_consumption(), 0.0)
        self.assertTrue(cee.is_command_completed(0))

    def test_from_coordinates_fixed_at_construction(self):
        """Moving the node later does not move the segment start."""
        self.uav.x = 99.0
        self.assertEqual(self.cee.from_coordinates, (0.0, 0.0, 0.0))
        self.assertEqual(self.cee.to_coordinates, (30.0, 40.0, 0.0))
        self.assertIs(self.cee.type, CeeType.WAYPOINT)
        self.assertEqual(self.cee.type_name, "Waypoint")


class TestLifecycle(unittest.TestCase):
    """Test lifecycle ordering and error reporting."""

    def setUp(self):
        self.uav = make_uav()
        self.cee = WaypointCEE(self.uav, WaypointCommand(100, 0, 0))

    def test_states(self):
        """The engine walks CREATED, INITIALIZED, ACTIVE, COMPLETED."""
        self.assertIs(self.cee.state, CeeState.CREATED)
        self.cee.initialize(0)
        self.assertIs(self.cee.state, CeeState.INITIALIZED)
        self.assertFalse(self.cee.started)
        self.cee.set_node_parameters(0)
        self.assertTrue(self.cee.is_active)
        self.assertEqual(float(self.cee.time_execution_start), 0.0)
        self.cee.mark_completed()
        self.assertIs(self.cee.state, CeeState.COMPLETED)
        self.assertTrue(self.cee.started)

    def test_reinitialize_before_activation(self):
        """Initialising twice is allowed until activation."""
        self.cee.initialize(0)
        self.cee.initialize(5)
        self.assertIs(self.cee.state, CeeState.INITIALIZED)

    def test_activate_twice(self):
        """Activation happens exactly once."""
        start(self.cee)
        with self.assertRaises(ValueError):
            self.cee.set_node_parameters(1)
        with self.assertRaises(ValueError):
            self.cee.initialize(1)

    def test_activate_before_initialize(self):
        """Activation requires initialisation."""
        with self.assertRaises(ValueError):
            self.cee.set_node_parameters(0)

    def test_update_requires_activation(self):
        """update_state needs an active engine and a positive step."""
        self.cee.initialize(0)
        with self.assertRaises(ValueError):
            self.cee.update_state(1.0)
        self.cee.set_node_parameters(0)
        with self.assertRaises(ValueError):
            self.cee.update_state(0.0)

    def test_missing_command(self):
        """Initialising without a command is an error."""
        cee = WaypointCEE(self.uav, None)
        with self.assertRaises(MissingCommandError):
            cee.initialize(0)

    def test_premature_forecast(self):
        """Forecasts need initialised kinematics."""
        with self.assertRaises(PrematureQueryError):
            self.cee.get_overall_duration()
        with self.assertRaises(PrematureQueryError):
            self.cee.get_probable_consumption()

    def test_negative_consumption_draw(self):
        """A negative drawn rate violates an invariant."""
        cee = WaypointCEE(make_uav(provider=NegativeProvider()), WaypointCommand(10, 0, 0))
        with self.assertRaises(InvariantViolationError):
            cee.initialize(0)

    def test_implausible_forecast(self):
        """A forecast above the sanity ceiling is rejected."""
        uav = make_uav(flight_model=FlightModel(horizontal_consumption=5000.0))
        cee = WaypointCEE(uav, WaypointCommand(10, 0, 0))
        cee.initialize(0)
        with self.assertRaises(InvariantViolationError):
            cee.get_probable_consumption()

    def test_override_completes(self):
        """command_completed ends the engine regardless of position."""
        start(self.cee)
        self.assertFalse(self.cee.is_command_completed(0))
        self.cee.command_completed = True
        self.assertTrue(self.cee.is_command_completed(0))

    def test_mission_flags(self):
        """Mission flags default to a replaceable mission step."""
        self.assertTrue(self.cee.part_of_mission)
        self.assertTrue(self.cee.replacement_needed)
        self.cee.set_part_of_mission(False)
        self.cee.set_no_replacement_needed()
        self.assertFalse(self.cee.part_of_mission)
        self.assertFalse(self.cee.replacement_needed)

    def test_default_actions(self):
        """Waypoints have no entry effects and no follow-up engines."""
        start(self.cee)
        self.assertEqual(self.cee.perform_exit_actions(0), [])


if __name__ == "__main__":
    unittest.main()
