# Safe-speed envelope and win/fail state machine
# FORBIDDEN: logging, any I/O

import math
from typing import Optional

from ..core.types import (
    FailureReason,
    GameStatus,
    TerminalConfig,
    TrackLayout,
    Transition,
)

BRAKING_HINT_DISTANCE = 80.0


class RuleEngine:
    """Decides when a run is won or lost.

    Transitions only fire while the run is RUNNING. Hitting the bumper
    always wins over a comfort failure, and a station stop only counts when
    the train is both slow enough and inside the station band.
    """

    def __init__(self, config: TerminalConfig, safe_speed_max: float):
        """Initialize rule engine.

        Args:
            config: Stop threshold and approach deceleration
            safe_speed_max: Upper bound for any advertised safe speed
        """
        self.config = config
        self.safe_speed_max = safe_speed_max
        self.layout: Optional[TrackLayout] = None

    def set_layout(self, layout: TrackLayout) -> None:
        self.layout = layout

    def approach_cap(self, distance: float) -> float:
        """Highest speed from which approach_decel still stops before the bumper."""
        if self.layout is None:
            return self.safe_speed_max
        remaining = max(0.0, self.layout.bumper_distance - distance)
        cap = math.sqrt(2.0 * self.config.approach_decel * remaining)
        return min(cap, self.safe_speed_max)

    def compute_safe_speed(self, distance: float, curvature_safe_speed: float) -> float:
        """Combine the curvature limit with the braking envelope to the bumper."""
        return min(curvature_safe_speed, self.approach_cap(distance))

    def check_transition(
        self,
        distance: float,
        speed: float,
        comfort: float,
        current_status: GameStatus,
    ) -> Optional[Transition]:
        """Evaluate win/fail conditions for one tick.

        Args:
            distance: Train distance along the track
            speed: Train speed
            comfort: Current comfort value
            current_status: Status before this tick

        Returns:
            The new status, or None when nothing changes
        """
        if current_status is not GameStatus.RUNNING or self.layout is None:
            return None

        if distance >= self.layout.bumper_distance:
            return Transition(GameStatus.FAILED, FailureReason.BUMPER)
        if comfort <= 0.0:
            return Transition(GameStatus.FAILED, FailureReason.COMFORT)
        if speed <= self.config.stop_speed_threshold and self.layout.in_station(distance):
            return Transition(GameStatus.WON)
        return None

    def get_status_message(
        self,
        status: GameStatus,
        failure_reason: Optional[FailureReason],
        level: int,
        distance: float,
    ) -> str:
        """One-line driver briefing for the HUD."""
        if status is GameStatus.READY:
            return f"Drive to Level {level} terminal and stop before the platform ends."
        if status is GameStatus.WON:
            return "Station stop complete. You win."
        if status is GameStatus.FAILED:
            if failure_reason is FailureReason.BUMPER:
                return "Bumper impact. You lose."
            return "Ride comfort collapsed. You lose."

        if self.layout is None:
            return f"Level {level} terminal ahead."

        to_station_end = self.layout.station_end_distance - distance
        station_length = self.layout.station_end_distance - self.layout.station_start_distance
        if to_station_end > station_length + BRAKING_HINT_DISTANCE:
            return f"Level {level} terminal in {math.ceil(to_station_end)} m"
        if to_station_end > station_length:
            return f"Station ahead. Begin braking ({math.ceil(to_station_end)} m)."
        if to_station_end > 0:
            return f"Stop before platform end: {max(1, math.ceil(to_station_end))} m"

        to_bumper = self.layout.bumper_distance - distance
        if to_bumper > 0:
            return f"Past station end. Bumper in {max(1, math.ceil(to_bumper))} m"
        return "Bumper impact. You lose."
