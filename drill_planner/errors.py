"""
Exception hierarchy for the drill planner.
"""


class DrillPlannerError(Exception):
    """Base class for all drill planner errors."""
    pass


class PreconditionError(DrillPlannerError):
    """A user action was attempted without what it needs (no player selected, empty court...)."""
    pass


class InvalidElementError(DrillPlannerError, ValueError):
    """A court element could not be parsed."""
    pass


class PersistenceError(DrillPlannerError):
    """Loading or saving drills/routines failed."""
    pass


class PlaybackError(DrillPlannerError):
    """A playback clock was used after being closed."""
    pass
