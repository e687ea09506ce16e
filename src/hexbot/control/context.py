"""Runtime context owning the board, the robot model and the diff baseline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from hexbot.config.models import ControlConfig
from hexbot.sequence import Direction, GaitSequence, start_sequence, update_sequence
from hexbot.serial_io import Command, MovementStatus, SSC32Board
from hexbot.services.events import QueryKind
from hexbot.state_machine import RobotModel


@dataclass
class ControlContext:
    """Everything the control engine needs to turn intents into board commands.

    The previous sequence and speed form the diff baseline: they always
    describe what the board currently holds (or ``None`` when unknown) and
    are only updated after a command has been written successfully.
    """

    board: SSC32Board
    config: ControlConfig = field(default_factory=ControlConfig)
    model: RobotModel = field(default_factory=RobotModel)
    base_sequence: GaitSequence = field(default_factory=GaitSequence)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("control.context"))

    reachable: bool = True
    _previous_sequence: Optional[GaitSequence] = None
    _previous_speed: int = 0
    _direction: Direction = Direction.FORWARD

    @property
    def previous_sequence(self) -> Optional[GaitSequence]:
        return self._previous_sequence

    @property
    def previous_speed(self) -> int:
        return self._previous_speed

    @property
    def direction(self) -> Direction:
        return self._direction

    def new_command(self) -> Command:
        return Command(self.model)

    # Walking -------------------------------------------------------------------

    def walk(self, direction: Direction = Direction.FORWARD) -> bool:
        """Walk in ``direction``, sending only what differs from the baseline."""
        target = self.base_sequence.for_direction(direction)
        command = self.new_command()
        if self._previous_sequence is None:
            self.logger.info("🚶 WALK %s: full sequence @%d%%", direction.value, self.model.speed)
            start_sequence(command, target)
        else:
            self.logger.info("🚶 WALK %s: sequence update @%d%%", direction.value, self.model.speed)
            update_sequence(command, self._previous_sequence, self._previous_speed, target)
        sent = self._send(command)
        self._commit(target)
        self._direction = direction
        return sent

    def stop_walking(self) -> bool:
        """Stop the board sequencer; a no-op when it is already stopped."""
        command = self.new_command().stop_hex_sequencer()
        if command.is_empty():
            self.logger.debug("🛑 SEQUENCER: already stopped")
            return False
        self.logger.info("🛑 SEQUENCER: commanding stop")
        return self._send(command)

    def set_speed(self, speed: int) -> bool:
        """Store the new speed and push it to the board when the robot is walking."""
        self.model.speed = speed
        return self._push_speed()

    def adjust_speed(self, delta: int) -> bool:
        """Change the speed by ``delta`` percent, clamped to 0..200, and push it."""
        self.model.adjust_speed(delta)
        return self._push_speed()

    def _push_speed(self) -> bool:
        """Send ``XS`` for the model speed when walking; the baseline speed follows."""
        self.logger.info("Set speed to: %d%%", self.model.speed)
        if not self.model.is_walking or self._previous_sequence is None:
            return False
        command = update_sequence(
            self.new_command(),
            self._previous_sequence,
            self._previous_speed,
            self._previous_sequence,
        )
        sent = self._send(command)
        self._previous_speed = self.model.speed
        return sent

    def reload_sequence(self, sequence: GaitSequence) -> bool:
        """Adopt a new base sequence; a walking robot is stopped and restarted with it."""
        self.base_sequence = sequence
        if not self.model.is_walking:
            self.logger.info("Gait sequence updated; will be applied on next walk.")
            return False
        self.logger.info("Gait sequence changed while walking; restarting sequencer.")
        self.stop_walking()
        target = sequence.for_direction(self._direction)
        sent = self._send(start_sequence(self.new_command(), target))
        self._commit(target)
        return sent

    # Servos ----------------------------------------------------------------------

    def move_servos(
        self,
        channels: Iterable[int],
        pulse: int,
        speed: Optional[int] = None,
        time: Optional[int] = None,
    ) -> bool:
        """Send every channel to ``pulse`` on one line so the moves finish together."""
        command = self.new_command()
        for channel in channels:
            command.single_servo(channel, pulse, speed, time)
        return self._send(command)

    def stop_servos(self, channels: Iterable[int]) -> bool:
        """Halt each channel in place."""
        command = self.new_command()
        for channel in channels:
            command.stop_servo(channel)
        return self._send(command)

    def set_servo_offset(self, channel: int, offset: int) -> bool:
        """Apply a center offset to one channel."""
        return self._send(self.new_command().servo_position_offset(channel, offset))

    def send_startup_pose(self) -> bool:
        """Move the configured servos to their start position in one line."""
        command = self.new_command()
        for pose in self.config.startup_pose:
            command.single_servo(pose.channel, pose.pulse)
        return self._send(command)

    # Queries ---------------------------------------------------------------------

    def query_status(self, kind: QueryKind, channel: Optional[int] = None) -> object:
        """Run one board query and log the answer."""
        if kind is QueryKind.VERSION:
            result: object = self.board.get_version()
        elif kind is QueryKind.MOVEMENT:
            result = self.board.query_movement_status()
        else:
            if channel is None:
                raise ValueError("A channel is required for a pulse width query.")
            result = self.board.query_pulse_width(channel)
        self.logger.info("📥 QUERY %s: %s", kind.value, result)
        return result

    def wait_for_movement(self) -> MovementStatus:
        """Poll ``Q`` until the current servo moves have finished."""
        return self.board.wait_until_movement_complete(
            poll_interval_s=self.config.status_poll_interval_ms / 1000.0,
            timeout_s=self.config.movement_timeout_ms / 1000.0,
            max_unknown=self.config.max_unknown_status,
        )

    # Connectivity ------------------------------------------------------------------

    def mark_unreachable(self) -> None:
        """Forget the baseline; the next walk rewrites the whole sequence."""
        if self.reachable:
            self.logger.error("❌ BOARD: unreachable, running degraded")
        self.reachable = False
        self._previous_sequence = None

    def reconnect(self) -> bool:
        """Reopen the link; a restored board gets a full sequence on the next walk."""
        if not self.board.link.reopen():
            return False
        self.logger.info("✅ BOARD: connection restored")
        self.reachable = True
        self._previous_sequence = None
        return True

    def _send(self, command: Command) -> bool:
        """Execute ``command`` unless it is empty; returns whether anything was written."""
        if command.is_empty():
            return False
        command.execute(self.board)
        return True

    def _commit(self, sequence: GaitSequence) -> None:
        self._previous_sequence = sequence
        self._previous_speed = self.model.speed
