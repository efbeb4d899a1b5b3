class SchedulingInputError(Exception):
    """Base class for errors in the scheduling inputs, raised before any search begins."""

    pass


class InvalidDateRangeError(SchedulingInputError):
    """Raised when the scheduling end date is before the start date."""

    pass


class InvalidConstraintWindowError(SchedulingInputError):
    """Raised when an unavailability constraint has validFrom after validUntil."""

    pass


class NoEligibleNursesError(SchedulingInputError):
    """Raised when a ward that needs staff cannot be staffed by any nurse, by qualification, ward access or hierarchy level."""

    pass


class InputMismatchError(SchedulingInputError):
    """Raised when nurses, wards and constraints do not reference each other consistently."""

    pass


class InvalidSettingsError(SchedulingInputError):
    """Raised when the run settings are inconsistent."""


class SchedulingInternalError(Exception):
    """Base class for broken invariants inside the search. Fatal for the run."""

    pass


class InvalidIndividualError(SchedulingInternalError):
    """Raised when a genetic operator produces a malformed individual."""


class PopulationInitializationError(SchedulingInternalError):
    """Raised when the initial population cannot be built."""


class FitnessEvaluationError(SchedulingInternalError):
    """Raised when evaluating an individual fails."""


class FileReadingError(Exception):
    """Raised when there is an error reading a file."""

    pass


class FileContentError(Exception):
    """Raised when the content of a file is not as expected."""

    pass


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    InvalidDateRangeError: 400,
    InvalidConstraintWindowError: 400,
    NoEligibleNursesError: 422,
    InputMismatchError: 400,
    InvalidSettingsError: 400,
    InvalidIndividualError: 500,
    PopulationInitializationError: 500,
    FitnessEvaluationError: 500,
    FileReadingError: 500,
    FileContentError: 400,
}
