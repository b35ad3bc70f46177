# Terminal layout derived from track length
# FORBIDDEN: logging, any I/O

from ..core.types import TerminalConfig, TrackLayout

MIN_BUMPER_DISTANCE = 4.0
MIN_BUMPER_OFFSET = 1.0
MIN_STATION_GAP = 5.0
MIN_STATION_LENGTH = 20.0


def compute_track_layout(track_length: float, config: TerminalConfig) -> TrackLayout:
    """Place the bumper and station band at the end of the track.

    The bumper sits a small offset before the track end, the station ends a
    gap before the bumper and extends backwards by the station length.

    Args:
        track_length: Total centerline length in meters
        config: Terminal offsets

    Returns:
        TrackLayout with bumper, station start and station end distances
    """
    bumper_offset = max(MIN_BUMPER_OFFSET, config.bumper_offset_from_track_end)
    bumper_distance = max(MIN_BUMPER_DISTANCE, track_length - bumper_offset)
    station_gap = max(MIN_STATION_GAP, config.station_gap_to_bumper)
    station_end = max(0.0, bumper_distance - station_gap)
    station_length = max(MIN_STATION_LENGTH, config.station_length)
    station_start = max(0.0, station_end - station_length)

    return TrackLayout(
        bumper_distance=bumper_distance,
        station_start_distance=station_start,
        station_end_distance=station_end,
    )
