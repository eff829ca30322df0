"""Error taxonomy shared by every service.

Callers branch on the exception class (or its ``kind``), never on the
message text.
"""


class TrainerError(Exception):
    """Base class for all speedread errors."""

    kind = "error"


class InvalidInputError(TrainerError, ValueError):
    """Malformed or out-of-range input. Never retried."""

    kind = "validation"


class ConflictError(TrainerError):
    """Operation conflicts with the current state of a record."""

    kind = "conflict"


class NotFoundError(TrainerError, LookupError):
    """Unknown session, content or question set."""

    kind = "not_found"


class UpstreamUnavailableError(TrainerError):
    """A collaborator (e.g. question generator) could not produce a result."""

    kind = "upstream_unavailable"
