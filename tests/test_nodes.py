"""
Tests for UAV nodes driving their engines, and for charging stations.
"""

import typing
import unittest

from uavexec.cee import CeeType, CommandExecEngine, IdleCEE, WaypointCEE, make_cee
from uavexec.command import (
    ChargeCommand,
    Command,
    HoldPositionCommand,
    IdleCommand,
    TakeoffCommand,
    WaypointCommand,
)
from uavexec.energy import Battery
from uavexec.messages import Message, ReserveSpotMessage
from uavexec.model import FixedConsumptionProvider, ForecastConsumptionProvider
from uavexec.nodes import ChargingNetwork, ChargingStation, UAVNode
from uavexec.unit import ClockTime, MilliampHour


def make_uav(x=0.0, y=0.0, z=0.0, rate=1.0, battery=None, network=None, name="uav"):
    return UAVNode(
        x,
        y,
        z,
        battery=battery or Battery(10_000),
        consumption_provider=FixedConsumptionProvider(rate),
        charging_network=network,
        name=name,
    )


class TestUAVDriver(unittest.TestCase):
    """Test the execution contract run by UAVNode.update."""

    def test_round_trip(self):
        """Take off, fly out and back, ending where the climb ended."""
        uav = make_uav()
        uav.assign(TakeoffCommand(z=30))
        uav.assign(WaypointCommand(100, 0, 30))
        uav.assign(WaypointCommand(0, 0, 30))

        for t in range(60):
            uav.update(1, t)

        self.assertEqual(uav.position, (0.0, 0.0, 30.0))
        self.assertFalse(uav.is_busy)
        self.assertEqual(
            [c.type for c in uav.history], [CeeType.TAKEOFF, CeeType.WAYPOINT, CeeType.WAYPOINT]
        )

    def test_rest_of_slice_goes_to_next_engine(self):
        """An engine finishing mid-slice hands the remainder to the next one."""
        uav = make_uav()
        uav.assign(TakeoffCommand(z=9))
        uav.assign(WaypointCommand(10, 0, 9))

        uav.update(5, 0)

        self.assertEqual(uav.position, (10.0, 0.0, 9.0))
        self.assertEqual(len(uav.history), 2)
        self.assertIsNone(uav.current_cee)
        # 3 s climbing and 1 s flying at 1 mAh/s
        self.assertAlmostEqual(float(uav.battery.remaining), 10_000 - 4.0)

    def test_hold_ends_on_its_deadline(self):
        """A hold shorter than the slice grid completes without overrunning."""
        uav = make_uav()
        uav.assign(HoldPositionCommand(0, 0, 0, 2.5))
        uav.assign(WaypointCommand(5, 0, 0))

        for t in range(3):
            uav.update(1, t)

        self.assertEqual(uav.history[0].type, CeeType.HOLD_POSITION)
        self.assertEqual(uav.position, (5.0, 0.0, 0.0))

    def test_hold_deadline_just_before_slice_end_late_in_run(self):
        """A deadline a few microseconds before the slice end is met, even at large times."""
        uav = make_uav(0, 0, 10)
        uav.assign(HoldPositionCommand(0, 0, 10, 1 - 4e-6))

        uav.update(1, 10_000)

        self.assertEqual([c.type for c in uav.history], [CeeType.HOLD_POSITION])
        self.assertIsNone(uav.current_cee)
        self.assertAlmostEqual(float(uav.battery.remaining), 10_000 - (1 - 4e-6))

    def test_zero_length_engines_take_no_time(self):
        """Engines complete on arrival are finished within the same slice."""
        uav = make_uav()
        uav.assign(HoldPositionCommand(0, 0, 0, 0))
        uav.assign(WaypointCommand(0, 0, 0))
        uav.assign(WaypointCommand(10, 0, 0))

        uav.update(1, 0)

        self.assertEqual(len(uav.history), 3)
        self.assertEqual(uav.position, (10.0, 0.0, 0.0))

    def test_idle_until_cancelled(self):
        """Idle keeps the UAV busy until cancelled."""
        uav = make_uav()
        uav.assign(IdleCommand())
        uav.assign(WaypointCommand(10, 0, 0))

        for t in range(10):
            uav.update(1, t)
        self.assertIsInstance(uav.current_cee, IdleCEE)
        self.assertEqual(uav.position, (0.0, 0.0, 0.0))

        uav.cancel_current()
        uav.update(1, 10)
        self.assertEqual(uav.position, (10.0, 0.0, 0.0))

    def test_empty_queue(self):
        """Updating an idle UAV does nothing."""
        uav = make_uav()
        uav.update(1, 0)
        self.assertIsNone(uav.current_cee)
        self.assertFalse(uav.is_busy)

    def test_prepend_keeps_order(self):
        """Prepended engines run before queued commands, in the given order."""
        uav = make_uav()
        uav.assign(WaypointCommand(1, 0, 0))
        first = WaypointCEE(uav, WaypointCommand(2, 0, 0))
        second = WaypointCEE(uav, WaypointCommand(3, 0, 0))
        uav.prepend_cees([first, second])
        self.assertEqual(list(uav.cees), [first, second])
        self.assertEqual(list(uav.commands), [WaypointCommand(1, 0, 0)])
        self.assertIs(uav._next_cee(), first)

    def test_enqueue_foreign_engine(self):
        """Engines bound to another node are rejected."""
        uav, other = make_uav(), make_uav(name="other")
        with self.assertRaises(ValueError):
            uav.enqueue(WaypointCEE(other, WaypointCommand(1, 0, 0)))

    def test_forecast_provider_draws_around_model(self):
        """The default provider samples the engine's own forecast."""
        uav = UAVNode(0, 0, 0, name="uav")
        self.assertIsInstance(uav.consumption_provider, ForecastConsumptionProvider)
        cee = WaypointCEE(uav, WaypointCommand(100, 0, 0))
        cee.initialize(0)
        self.assertGreaterEqual(cee.consumption_per_second, 0.0)
        self.assertLess(cee.consumption_per_second, 10.0)


class TestMakeCee(unittest.TestCase):
    """Test the engine factory."""

    def test_dispatch(self):
        """Each command maps to its engine."""
        uav = make_uav()
        self.assertIs(make_cee(uav, TakeoffCommand(10)).type, CeeType.TAKEOFF)
        self.assertIs(make_cee(uav, ChargeCommand()).type, CeeType.CHARGE)
        self.assertIs(make_cee(uav, IdleCommand()).type, CeeType.IDLE)

    def test_signature_is_typed(self):
        """The factory declares the node and command types it accepts."""
        hints = typing.get_type_hints(make_cee, localns={"UAVNode": UAVNode})
        self.assertIs(hints["node"], UAVNode)
        self.assertIs(hints["command"], Command)
        self.assertIs(hints["return"], CommandExecEngine)

    def test_unknown_command(self):
        """Commands without an engine are rejected."""

        class Survey(Command):
            pass

        with self.assertRaises(TypeError):
            make_cee(make_uav(), Survey())


class TestChargingStation(unittest.TestCase):
    """Test ChargingStation and ChargingNetwork classes."""

    def setUp(self):
        self.station = ChargingStation(0, 0, 0, charge_rate=50.0, name="pad")
        self.uav = make_uav(battery=Battery(1000, 800))

    def reserve(self):
        message = ReserveSpotMessage(ClockTime(10), MilliampHour(25), sender=self.uav)
        self.uav.get_output_channel_to(self.station).send(message)
        return message

    def test_records_reservation(self):
        """Reservations and their senders are recorded."""
        message = self.reserve()
        self.assertEqual(self.station.reservations, [message])
        self.assertEqual(self.station.visitors, [self.uav])
        self.assertEqual(self.station.inbox, [message])

    def test_ignores_other_messages(self):
        """Unrelated messages only land in the inbox."""
        self.uav.get_output_channel_to(self.station).send(Message(sender=self.uav))
        self.assertEqual(self.station.reservations, [])
        self.assertEqual(len(self.station.inbox), 1)

    def test_charges_docked_uav(self):
        """A reserved UAV charging on the pad is charged until full."""
        self.reserve()
        self.uav.assign(ChargeCommand(self.station))
        self.uav.assign(IdleCommand())

        self.uav.update(1, 0)
        self.station.update(1, 0)
        self.assertAlmostEqual(float(self.uav.battery.remaining), 850.0)

        for t in range(1, 6):
            self.uav.update(1, t)
            self.station.update(1, t)
        self.assertTrue(self.uav.battery.is_full())
        self.assertEqual(self.uav.history[0].type, CeeType.CHARGE)
        self.assertEqual(self.uav.history[0].get_consumption_total(), -200.0)
        self.assertIs(self.uav.current_cee.type, CeeType.IDLE)

    def test_does_not_charge_away_from_pad(self):
        """UAVs that are not on the pad are not charged."""
        self.reserve()
        self.uav.x = 5.0
        self.uav.assign(ChargeCommand(self.station))
        self.uav.update(1, 0)
        self.station.update(1, 0)
        self.assertEqual(float(self.uav.battery.remaining), 800.0)

    def test_invalid_rate(self):
        """The charge rate must be positive."""
        with self.assertRaises(ValueError):
            ChargingStation(charge_rate=0)

    def test_nearest(self):
        """The network returns the closest station."""
        far = ChargingStation(100, 0, 0, name="far")
        network = ChargingNetwork([far, self.station])
        self.assertIs(network.nearest(90, 0, 0), far)
        self.assertIs(network.nearest(10, 0, 0), self.station)
        self.assertEqual(len(network), 2)
        self.assertIsNone(ChargingNetwork().nearest(0, 0, 0))

    def test_uav_lookup(self):
        """UAVs look up stations through their network, if any."""
        self.assertIsNone(self.uav.find_nearest_charging_station(0, 0, 0))
        self.uav.charging_network = ChargingNetwork([self.station])
        self.assertIs(self.uav.find_nearest_charging_station(3, 4, 0), self.station)


if __name__ == "__main__":
    unittest.main()
