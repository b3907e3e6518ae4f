"""Single-slot tracker for ``\\ifnum\\specdep=1 ... \\else ... \\fi`` regions."""

from typing import Optional

from gettables.errors import ConditionalRegionError
from gettables.models import Condition


class ConditionTracker:
    """Tracks the profile condition applying to entries being scanned.

    States: none → compatibility (begin) → core (else) → none (end).
    Only one region can be active; nesting is an error.
    """

    def __init__(self):
        self._current: Optional[Condition] = None

    @property
    def current(self) -> Optional[Condition]:
        """Condition of the active region, or None outside any region."""
        return self._current

    @property
    def active(self) -> bool:
        return self._current is not None

    def begin(self) -> None:
        """Enter the compatibility-only branch."""
        if self._current is not None:
            raise ConditionalRegionError(
                f"Nested conditional region inside a {self._current.value} region"
            )
        self._current = Condition.COMPATIBILITY

    def switch(self) -> None:
        """Move from the compatibility-only branch to the core-only branch."""
        if self._current != Condition.COMPATIBILITY:
            raise ConditionalRegionError(
                "\\else outside the compatibility branch of a conditional region"
            )
        self._current = Condition.CORE

    def end(self) -> None:
        """Leave the active region."""
        if self._current is None:
            raise ConditionalRegionError("\\fi without an active conditional region")
        self._current = None
