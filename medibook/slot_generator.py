"""Bookable slot generation for a single schedule window."""

from collections.abc import Collection

from medibook.errors import ConfigError
from medibook.time_utils import format_clock_time


def generate_slots(
    start_minute: int,
    end_minute: int,
    duration_minutes: int,
    booked: Collection[str] = (),
) -> list[str]:
    """Return the free slot labels in a schedule window, in ascending order.

    Slots start at start_minute and step by duration_minutes while the slot
    start is strictly before end_minute. A slot does not have to fit entirely
    inside the window. Candidates are compared to ``booked`` by their
    canonical "H:MM AM|PM" label.
    """
    if duration_minutes <= 0:
        raise ConfigError(f"Slot duration must be positive, got {duration_minutes}")

    booked = set(booked)
    slots = []
    current = start_minute
    while current < end_minute:
        label = format_clock_time(current)
        if label not in booked:
            slots.append(label)
        current += duration_minutes

    return slots
