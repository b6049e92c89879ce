class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateError(ValidationError):
    """Malformed date or date range."""


class InvalidTimeError(ValidationError):
    """Malformed time, non-monotonic IN/OUT ordering, or a strict pairing violation."""


class InvalidPositionError(ValidationError):
    """Unknown location code."""


class InvalidPairError(ValidationError):
    """Pair index out of range for the day."""

    def __init__(self, index: int):
        super().__init__(f"Invalid pair index: {index}")
        self.index = index


class NoEventsForDateError(ValidationError):
    def __init__(self, date_str: str):
        super().__init__(f"No events found for date {date_str}")
        self.date_str = date_str
