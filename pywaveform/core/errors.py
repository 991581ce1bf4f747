"""Error taxonomy for the aggregation, lookup and layout passes."""


class WaveformError(Exception):
    """Base class for all pywaveform errors."""
    pass


class NoPrimaryDataError(WaveformError):
    """Raised by a sample store when an entity never logged a component kind.

    The series builder treats this as an empty, successful result.
    """

    def __init__(self, entity_path, kind):
        super().__init__(f"No {kind.name} data for {entity_path}")
        self.entity_path = entity_path
        self.kind = kind


class ResolutionError(WaveformError):
    """Raised when the annotation resolver itself fails.

    An unknown class id is not an error; it only drops the transition.
    This aborts the aggregation pass.
    """
    pass


class InvalidBoundsError(WaveformError):
    """Raised when a domain's folded value range has min > max."""

    def __init__(self, domain: str, min_y: float, max_y: float):
        super().__init__(f"Invalid analog y range for domain {domain!r}: ({min_y}, {max_y})")
        self.domain = domain
        self.min_y = min_y
        self.max_y = max_y
