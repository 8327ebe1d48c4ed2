"""Error and warning types of the event generation core.

Two tiers:
    Fatal (GenerationError subclasses): configuration or physics-model coverage
    defects. They are raised, never caught inside nuevg, and should stop the job.

    Recoverable (SplineAvailabilityWarning): the driver degrades to direct
    cross section computation and keeps going.

Import Policy:
    from nuevg.errors import GenerationError, NoGeneratorFoundError

DO NOT use: from nuevg.errors import *
"""


class GenerationError(Exception):
    """Base class of all fatal event generation conditions."""

    pass


class InvalidInitialStateError(GenerationError):
    """Raised when the driver's initial state is missing or invalid."""

    pass


class NoInteractionSelectedError(GenerationError):
    """Raised when no candidate interaction survives selection."""

    pass


class NoGeneratorFoundError(GenerationError):
    """Raised when no event generator claims the selected interaction."""

    pass


class RetryLimitExceededError(GenerationError):
    """Raised when only unphysical events are produced up to the retry bound."""

    def __init__(self, message: str, n_attempts: int):
        super().__init__(message)
        self.n_attempts = n_attempts


class SplinesNotLoadedError(GenerationError):
    """Raised when an operation needs cross section splines that are not in use."""

    pass


class InvalidSplineParametersError(GenerationError, ValueError):
    """Raised for non-positive or inverted energy bounds or too few knots."""

    pass


class InvalidEnergyRangeError(GenerationError):
    """Raised when the aggregate validity range is empty or inverted."""

    pass


class SplineAvailabilityWarning(UserWarning):
    """Spline mode was requested but at least one channel spline is missing."""

    pass
