"""User-input errors raised by the calculators.

All of these describe something the user can fix in the form; none of them
is a system fault. The API turns them into a 422 response carrying the
message and the offending field.
"""

from __future__ import annotations


class EstimatorError(Exception):
    """Base class for calculator input errors.

    Attributes:
        kind: Stable machine-readable error code.
        field: Name of the input field that triggered the error, if any.
        message: Human-readable notice to show the user.
    """

    kind = "estimator_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidNumericInput(EstimatorError):
    """A non-empty amount field could not be parsed as a number."""

    kind = "invalid_numeric_input"

    def __init__(self, field: str, raw: str) -> None:
        self.raw = raw
        super().__init__("Please enter a valid number.", field=field)


class UnknownState(EstimatorError):
    """No state was selected, or the selection has no flat rate."""

    kind = "unknown_state"

    def __init__(self, state: str) -> None:
        self.state = state
        message = (
            "Please select a state."
            if not state
            else "Tax rate for this state not found."
        )
        super().__init__(message, field="state")


class UnselectedFilingStatus(EstimatorError):
    """No valid filing status was selected."""

    kind = "unselected_filing_status"

    def __init__(self, value: str | None = None) -> None:
        self.value = value
        super().__init__("Please select a filing status.", field="filing_status")
