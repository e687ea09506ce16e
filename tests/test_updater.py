import dataclasses

import pytest

from hexbot.errors import SequenceRequiredError
from hexbot.sequence import GaitSequence, start_sequence, update_sequence
from hexbot.serial_io import Command
from hexbot.state_machine import MovementState, RobotModel

FULL_SEQUENCE = (
    "LH 1600 LM 1300 LL 1000 RH 1000 RM 1300 RL 1600 VS 3000 "
    "LF 700 LR 1600 RF 1600 RR 700 HT 1500 XL100 XR100"
)


def test_start_while_stopped_writes_every_field_then_speed(transport):
    model = RobotModel(speed=50)

    start_sequence(Command(model), GaitSequence()).execute(transport)

    assert transport.lines == [FULL_SEQUENCE + " XS 50"]
    assert model.state is MovementState.IN_WALK_SEQUENCE


def test_start_while_walking_stops_first(transport):
    model = RobotModel(speed=100)
    start_sequence(Command(model), GaitSequence()).execute(transport)

    start_sequence(Command(model), GaitSequence()).execute(transport)

    assert transport.lines[1:] == ["XSTOP", FULL_SEQUENCE + " XS 100"]
    assert model.state is MovementState.IN_WALK_SEQUENCE


def test_start_requires_sequence(model):
    with pytest.raises(SequenceRequiredError):
        start_sequence(Command(model), None)


def test_update_sends_only_changed_fields(transport):
    model = RobotModel(speed=100)
    old = GaitSequence()
    start_sequence(Command(model), old).execute(transport)
    new = dataclasses.replace(old, vertical_left_mid=1350, travel_percentage_right=-100)

    update_sequence(Command(model), old, 100, new).execute(transport)

    assert transport.lines[-1] == "LM 1350 XR-100"


def test_update_identical_sequence_while_walking_is_empty():
    model = RobotModel(speed=100)
    start_sequence(Command(model), GaitSequence()).execute(_Sink())

    command = update_sequence(Command(model), GaitSequence(), 100, GaitSequence())

    assert command.is_empty()


def test_update_sends_speed_when_it_changed(transport):
    model = RobotModel(speed=100)
    start_sequence(Command(model), GaitSequence()).execute(transport)
    model.speed = 150

    update_sequence(Command(model), GaitSequence(), 100, GaitSequence()).execute(transport)

    assert transport.lines[-1] == "XS 150"


def test_update_while_stopped_restarts_sequencer(transport):
    model = RobotModel(speed=70)

    update_sequence(Command(model), GaitSequence(), 70, GaitSequence().with_travel(-100, -100)).execute(transport)

    assert transport.lines == ["XL-100 XR-100 XS 70"]
    assert model.state is MovementState.IN_WALK_SEQUENCE


def test_update_requires_both_sequences(model):
    with pytest.raises(SequenceRequiredError):
        update_sequence(Command(model), None, 100, GaitSequence())
    with pytest.raises(SequenceRequiredError):
        update_sequence(Command(model), GaitSequence(), 100, None)


def test_speed_zero_still_starts_sequencer(transport):
    model = RobotModel(speed=0)

    start_sequence(Command(model), GaitSequence()).execute(transport)

    assert transport.lines[-1].endswith("XS 0")
    assert model.state is MovementState.IN_WALK_SEQUENCE


class _Sink:
    def write_line(self, line: str) -> None:
        pass
