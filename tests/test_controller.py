import pytest

from hexbot.control import ControlContext, ControlEngine
from hexbot.sequence import Direction, GaitSequence
from hexbot.services import (
    AdjustSpeedEvent,
    EventBus,
    QuitEvent,
    SequenceChangedEvent,
    ServoMoveEvent,
    SetSpeedEvent,
    StopWalkEvent,
    WalkEvent,
)
from hexbot.state_machine import RobotModel


@pytest.fixture
def bus():
    return EventBus(maxsize=16)


@pytest.fixture
def engine(board, bus):
    context = ControlContext(board=board, model=RobotModel(speed=50))
    return ControlEngine(context, bus, reconnect_delay_s=0.0)


def sent(serial_factory):
    return [line.rstrip("\r") for line in serial_factory.last.written_lines()]


def test_dispatch_walk_speed_and_stop(engine, serial_factory):
    assert engine.dispatch_event(WalkEvent(direction=Direction.FORWARD))
    assert engine.dispatch_event(AdjustSpeedEvent(delta=10))
    assert engine.dispatch_event(StopWalkEvent())

    lines = sent(serial_factory)
    assert lines[-2:] == ["XS 60", "XSTOP"]
    assert not engine.context.model.is_walking


def test_validation_error_rejects_batch(engine, serial_factory):
    assert not engine.dispatch_event(ServoMoveEvent(channels=(1, 40), pulse=1500))
    assert not engine.dispatch_event(SetSpeedEvent(speed=300))

    assert sent(serial_factory) == []
    assert engine.context.reachable


def test_transport_error_enters_degraded_mode(engine, serial_factory):
    engine.dispatch_event(WalkEvent())
    serial_factory.last.fail_writes = True

    assert not engine.dispatch_event(WalkEvent(direction=Direction.LEFT))

    assert not engine.context.reachable
    assert engine.context.previous_sequence is None


def test_reconnects_before_next_event(engine, serial_factory):
    engine.dispatch_event(WalkEvent())
    serial_factory.last.fail_writes = True
    engine.dispatch_event(WalkEvent(direction=Direction.LEFT))

    assert engine.dispatch_event(WalkEvent(direction=Direction.LEFT))

    assert engine.context.reachable
    assert sent(serial_factory)[0] == "XSTOP"
    assert sent(serial_factory)[1].endswith("XL100 XR-100 XS 50")


def test_unreachable_board_drops_board_events(engine, serial_factory):
    engine.context.mark_unreachable()
    serial_factory.fail = True

    assert not engine.dispatch_event(WalkEvent())
    assert engine.dispatch_event(SetSpeedEvent(speed=90))
    assert engine.context.model.speed == 90


def test_sequence_change_is_applied(engine, serial_factory):
    engine.dispatch_event(WalkEvent())

    engine.dispatch_event(SequenceChangedEvent(sequence=GaitSequence(vertical_movement_speed=2500)))

    assert engine.context.base_sequence.vertical_movement_speed == 2500
    assert "VS 2500" in sent(serial_factory)[-1]


def test_quit_event_sets_flag(engine):
    assert engine.dispatch_event(QuitEvent())
    assert engine.quit_requested
    assert engine.wait_for_quit(timeout=0)


def test_event_loop_processes_bus_and_stops_sequencer(engine, bus, serial_factory):
    engine.start()
    bus.publish(WalkEvent())
    bus.publish(QuitEvent())

    assert engine.wait_for_quit(timeout=2.0)
    engine.stop()

    assert not engine.is_running
    lines = sent(serial_factory)
    assert lines[0].endswith("XS 50")
    assert lines[-1] == "XSTOP"
