"""Exception hierarchy for runway.

All exceptions inherit from :class:`RunwayError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`runway.exit_codes`.
The top-level error handler in :func:`runway.app.main` catches
``RunwayError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    RunwayError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- EndpointNotFoundError  (exit 4)
    +-- GuideNotFoundError     (exit 4)
    +-- MalformedSpecError     (exit 7)
    +-- NoEndpointsError       (exit 8)
    +-- ConfigError            (exit 1)
"""

from runway.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_SPEC,
    EXIT_NO_ENDPOINTS,
    EXIT_NOT_FOUND,
)


class RunwayError(Exception):
    """Base exception for all runway errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`runway.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RunwayError):
    """Raised for invalid CLI arguments (e.g. an unparseable ``--endpoint``)."""

    exit_code = EXIT_INVALID_USAGE


class EndpointNotFoundError(RunwayError):
    """Raised when a requested ``METHOD /path`` is not part of the spec."""

    exit_code = EXIT_NOT_FOUND


class GuideNotFoundError(RunwayError):
    """Raised when no stored guide exists for a slug."""

    exit_code = EXIT_NOT_FOUND


class MalformedSpecError(RunwayError):
    """Raised when a document cannot be loaded, parsed, or dereferenced.

    Also raised when the ``info.title``, ``info.version`` or ``paths``
    fields are missing. No partially-built model is ever returned.
    """

    exit_code = EXIT_MALFORMED_SPEC


class NoEndpointsError(RunwayError):
    """Raised when a spec declares no endpoint runway can showcase."""

    exit_code = EXIT_NO_ENDPOINTS


class ConfigError(RunwayError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
