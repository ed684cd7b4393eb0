"""Authentication detection for a chosen endpoint.

Given a :class:`~runway.models.NormalizedSpec` and one of its endpoints,
:func:`detect_auth` works out which security scheme applies and how a caller
should supply credentials: the environment variable to export, the header
(or query parameter / cookie) that carries it, and shell-style setup
instructions.

Typical usage::

    from runway.auth import detect_auth

    auth = detect_auth(spec, endpoint)
    if auth is not None:
        print("\\n".join(auth.setup_instructions))

Sub-modules:

* :mod:`~runway.auth.detector` -- scheme selection and placement.
* :mod:`~runway.auth.instructions` -- human-readable setup text.
"""

from runway.auth.detector import build_auth_info, detect_auth, env_var_name

__all__ = ["build_auth_info", "detect_auth", "env_var_name"]
