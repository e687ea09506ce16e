import json

import pytest

from hexbot.errors import PulseWidthRangeError, TravelPercentageRangeError
from hexbot.sequence import Direction, GaitSequence, load_sequence


def test_defaults_describe_ready_posture():
    sequence = GaitSequence()

    assert sequence.vertical_left_high == 1600
    assert sequence.vertical_right_low == 1600
    assert sequence.vertical_movement_speed == 3000
    assert sequence.horizontal_movement_time == 1500
    assert (sequence.travel_percentage_left, sequence.travel_percentage_right) == (100, 100)
    assert len(GaitSequence.field_names()) == 14


def test_invalid_values_are_rejected():
    with pytest.raises(PulseWidthRangeError):
        GaitSequence(vertical_left_mid=100)
    with pytest.raises(TravelPercentageRangeError):
        GaitSequence(travel_percentage_right=150)


def test_from_mapping_accepts_both_key_styles():
    sequence = GaitSequence.from_mapping(
        {"VerticalServo_Left_HighValue": "1700", "horizontal_movement_time": 1200.0}
    )

    assert sequence.vertical_left_high == 1700
    assert sequence.horizontal_movement_time == 1200
    assert sequence.vertical_left_mid == GaitSequence().vertical_left_mid


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(KeyError):
        GaitSequence.from_mapping({"tail_wag": 1})


def test_from_mapping_keeps_base_values():
    base = GaitSequence(vertical_movement_speed=1000)

    sequence = GaitSequence.from_mapping({"travel_percentage_left": 50}, base=base)

    assert sequence.vertical_movement_speed == 1000
    assert sequence.travel_percentage_left == 50


@pytest.mark.parametrize(
    "direction, travel",
    [
        (Direction.BACKWARD, (-100, -100)),
        (Direction.LEFT, (100, -100)),
        (Direction.RIGHT, (-100, 100)),
    ],
)
def test_direction_presets(direction, travel):
    sequence = GaitSequence().for_direction(direction)

    assert (sequence.travel_percentage_left, sequence.travel_percentage_right) == travel
    assert sequence.vertical_left_high == GaitSequence().vertical_left_high


def test_forward_keeps_base_travel():
    base = GaitSequence(travel_percentage_left=80, travel_percentage_right=80)

    assert base.for_direction(Direction.FORWARD) is base


def test_load_yaml_nested(tmp_path):
    path = tmp_path / "gait.yaml"
    path.write_text("sequence:\n  vertical_left_high: 1650\n  horizontal_movement_time: 900\n", encoding="utf-8")

    sequence = load_sequence(path)

    assert sequence.vertical_left_high == 1650
    assert sequence.horizontal_movement_time == 900


def test_load_json_flat(tmp_path):
    path = tmp_path / "gait.json"
    path.write_text(json.dumps({"TravelPercentage_Left": -20}), encoding="utf-8")

    assert load_sequence(str(path)).travel_percentage_left == -20


def test_load_xml(tmp_path):
    path = tmp_path / "gait.xml"
    path.write_text(
        "<HexapodSequence>"
        '<VerticalServo_Left_HighValue value="1550"/>'
        "<HorizontalServo_MovementTime>1100</HorizontalServo_MovementTime>"
        "<Comment>ignored</Comment>"
        "</HexapodSequence>",
        encoding="utf-8",
    )

    sequence = load_sequence(path)

    assert sequence.vertical_left_high == 1550
    assert sequence.horizontal_movement_time == 1100


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sequence(tmp_path / "missing.yaml")
