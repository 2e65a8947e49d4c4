"""Status badge: a short label showing how many job records are stored."""

from typing import Optional

BADGE_COLOR = "#30e8bd"


class StatusBadge:
    """
    Holds the current badge label.

    The label is the stored record count as text, or "" when cleared.
    """

    def __init__(self):
        self.text = ""
        self.background_color: Optional[str] = None

    def show_count(self, count: int) -> None:
        """Show the count and set the badge color."""
        self.background_color = BADGE_COLOR
        self.text = str(count)

    def reflect_count(self, count: int) -> None:
        """Show the count, or clear the label when it is zero."""
        self.text = str(count) if count else ""

    def clear(self) -> None:
        self.text = ""
