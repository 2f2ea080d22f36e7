"""
Privilege guard — the installer must run as root *via sudo*.

A root login is rejected: steps such as SkywarnPlus-NG must run
their installer as the human who typed ``sudo``, so that identity
has to be known before anything else happens.
"""

from __future__ import annotations

import logging
import os
import pwd
import sys
from collections.abc import Callable, Mapping

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.errors import PrivilegeError, StepError

logger = logging.getLogger(__name__)

INVOCATION_HINT = "This script must be run with sudo (e.g. sudo asl3-mapp -a ...)."


def capture_context(
    *,
    euid: int | None = None,
    environ: Mapping[str, str] | None = None,
    isatty: Callable[[], bool] | None = None,
) -> InvocationContext:
    """Snapshot the process identity without judging it."""
    env = os.environ if environ is None else environ
    tty = isatty if isatty is not None else sys.stdin.isatty
    return InvocationContext(
        effective_uid=os.geteuid() if euid is None else euid,
        invoking_user=env.get("SUDO_USER") or None,
        interactive=tty(),
    )


def validate(
    *,
    euid: int | None = None,
    environ: Mapping[str, str] | None = None,
    isatty: Callable[[], bool] | None = None,
) -> InvocationContext:
    """Return the invocation context, or fail if not run via sudo.

    Raises:
        PrivilegeError: Not root, or root without a SUDO_USER.
    """
    context = capture_context(euid=euid, environ=environ, isatty=isatty)
    if not context.valid:
        raise PrivilegeError(INVOCATION_HINT)
    logger.debug(
        "Running as uid %d on behalf of %s", context.effective_uid, context.invoking_user
    )
    return context


def resolve_invoking_account(context: InvocationContext) -> pwd.struct_passwd:
    """Look up the account record of the user who invoked sudo.

    Raises:
        StepError: The account does not exist on this host.
    """
    user = context.invoking_user
    if not user:
        raise StepError("No invoking user (SUDO_USER) is known for this run.")
    try:
        return pwd.getpwnam(user)
    except KeyError:
        raise StepError(f"User {user} (SUDO_USER) not found on this system.") from None
