from .positions import resolve_positions, player_numbers
from .compiler  import RallyCompiler, compile_rally, travel_time_ms

__all__ = [
    "resolve_positions", "player_numbers",
    "RallyCompiler", "compile_rally", "travel_time_ms",
]
