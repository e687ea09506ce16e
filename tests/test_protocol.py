import pytest

from hexbot.errors import (
    ChannelRangeError,
    MovementSpeedRangeError,
    MovementTimeRangeError,
    PositionOffsetRangeError,
    ProtocolError,
    PulseWidthRangeError,
    ServoSpeedRangeError,
    SpeedPercentageRangeError,
    TravelPercentageRangeError,
    ValidationError,
)
from hexbot.serial_io import protocol
from hexbot.serial_io.protocol import FrontRear, LegPosition, MovementStatus, ServoSide


def test_single_servo_tokens():
    assert protocol.encode_single_servo(5, 1500) == "#5P1500"
    assert protocol.encode_single_servo(5, 1500, speed=100) == "#5P1500S100"
    assert protocol.encode_single_servo(5, 1500, time=2000) == "#5P1500T2000"
    assert protocol.encode_single_servo(31, 2500, speed=0, time=0) == "#31P2500S0T0"


@pytest.mark.parametrize("channel", [-1, 32, 1.5, True, "3"])
def test_channel_out_of_range(channel):
    with pytest.raises(ChannelRangeError):
        protocol.encode_single_servo(channel, 1500)


@pytest.mark.parametrize("pulse", [499, 2501])
def test_pulse_out_of_range(pulse):
    with pytest.raises(PulseWidthRangeError):
        protocol.encode_single_servo(0, pulse)


def test_pulse_limits_are_inclusive():
    assert protocol.encode_single_servo(0, 500) == "#0P500"
    assert protocol.encode_single_servo(0, 2500) == "#0P2500"


def test_servo_speed_and_time_ranges():
    with pytest.raises(ServoSpeedRangeError):
        protocol.encode_single_servo(0, 1500, speed=-1)
    with pytest.raises(ValidationError):
        protocol.encode_single_servo(0, 1500, time=65536)


def test_position_offset():
    assert protocol.encode_position_offset(3, -100) == "#3PO-100"
    assert protocol.encode_position_offset(3, 100) == "#3PO100"
    with pytest.raises(PositionOffsetRangeError):
        protocol.encode_position_offset(3, 101)


def test_stop_servo():
    assert protocol.encode_stop_servo(12) == "STOP12"
    with pytest.raises(ChannelRangeError):
        protocol.encode_stop_servo(40)


def test_sequencer_registers():
    assert protocol.encode_vertical_servo(ServoSide.LEFT, LegPosition.HIGH, 1600) == "LH 1600"
    assert protocol.encode_vertical_servo(ServoSide.RIGHT, LegPosition.LOW, 1000) == "RL 1000"
    assert protocol.encode_horizontal_servo(ServoSide.LEFT, FrontRear.REAR, 1600) == "LR 1600"
    assert protocol.encode_horizontal_servo(ServoSide.RIGHT, FrontRear.FRONT, 700) == "RF 700"
    assert protocol.encode_vertical_speed(3000) == "VS 3000"
    assert protocol.encode_horizontal_time(1500) == "HT 1500"


def test_travel_and_speed_percentages():
    assert protocol.encode_travel_percentage(ServoSide.LEFT, 100) == "XL100"
    assert protocol.encode_travel_percentage(ServoSide.RIGHT, -100) == "XR-100"
    assert protocol.encode_speed_percentage(0) == "XS 0"
    assert protocol.encode_speed_percentage(200) == "XS 200"
    with pytest.raises(TravelPercentageRangeError):
        protocol.encode_travel_percentage(ServoSide.LEFT, -101)
    with pytest.raises(SpeedPercentageRangeError):
        protocol.encode_speed_percentage(201)


def test_sequencer_timing_ranges():
    assert protocol.encode_vertical_speed(0) == "VS 0"
    with pytest.raises(MovementSpeedRangeError):
        protocol.encode_vertical_speed(65536)
    with pytest.raises(MovementTimeRangeError):
        protocol.encode_horizontal_time(0)


def test_validation_errors_are_value_errors():
    with pytest.raises(ValueError):
        protocol.validate_channel(99)


@pytest.mark.parametrize("response", [".", "+", ".\r", " + "])
def test_movement_status_complete(response):
    assert protocol.parse_movement_status(response) is MovementStatus.COMPLETE


@pytest.mark.parametrize("response", [None, "", "x"])
def test_movement_status_unexpected(response):
    with pytest.raises(ProtocolError):
        protocol.parse_movement_status(response)


@pytest.mark.parametrize("channel", [-1, 32])
def test_pulse_width_query_rejects_bad_channel(channel):
    with pytest.raises(ChannelRangeError):
        protocol.build_pulse_width_query(channel)


def test_pulse_width_query():
    assert protocol.build_pulse_width_query(4) == "QP 4"
    assert protocol.parse_pulse_width(bytes([150])) == 1500
    with pytest.raises(ProtocolError):
        protocol.parse_pulse_width(b"")
