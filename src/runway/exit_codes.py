"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~runway.exceptions.RunwayError` subclass.

Example::

    $ runway guide broken.json
    $ echo $?
    7   # EXIT_MALFORMED_SPEC -- the document could not be parsed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""A requested endpoint or stored guide does not exist."""

EXIT_MALFORMED_SPEC = 7
"""The OpenAPI document could not be loaded, parsed, or dereferenced."""

EXIT_NO_ENDPOINTS = 8
"""The document parsed fine but declares no usable endpoints."""
