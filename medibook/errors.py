"""Error types raised by the booking, availability and lifecycle services.

Each error carries the HTTP status it is reported with. Caller mistakes and
routine conflicts (a taken slot, a day with no schedule) are 4xx; corrupted
stored data and store failures are 5xx.
"""


class MediBookError(Exception):
    """Base class for all service errors."""
    status_code = 500


class ValidationError(MediBookError):
    """Raised when caller-supplied fields are missing or malformed."""
    status_code = 400


class NoScheduleError(MediBookError):
    """Raised when a doctor has no schedule for the requested date."""
    status_code = 400


class SlotTakenError(MediBookError):
    """Raised when the requested slot is booked or not offered."""
    status_code = 400


class NotFoundError(MediBookError):
    """Raised when a referenced row does not exist."""
    status_code = 404


class FormatError(MediBookError):
    """Raised when a clock time string cannot be parsed or formatted."""
    status_code = 500


class ScheduleFormatError(FormatError):
    """Raised when a stored schedule holds unparseable times."""
    pass


class ConfigError(MediBookError):
    """Raised when slot generation is given an unusable configuration."""
    status_code = 500


class StoreError(MediBookError):
    """Raised when the underlying SQLite store fails."""
    status_code = 500


class ScanError(MediBookError):
    """Raised when the prescription scanning collaborator fails."""
    status_code = 502


def public_message(exc: MediBookError) -> str:
    """Message safe to return to a caller.

    Caller errors and corrupted schedules keep their own text; other
    server-side failures get a fixed message and are logged instead.
    """
    if exc.status_code < 500 or isinstance(exc, ScheduleFormatError):
        return str(exc)
    if isinstance(exc, ScanError):
        return "Failed to process image"
    return "Server error"
