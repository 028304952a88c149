"""Two-tier size policy: fail above the hard limit, warn in between."""

from __future__ import annotations

from policy_gate.models.common import Status


def evaluate_size(
    measured: int | float,
    hard_limit: int | float,
    warn_limit: int | float | None = None,
    legacy_exempt: bool = False,
) -> Status:
    """Classify a measured size.

    A value equal to a limit is within it. Above ``hard_limit`` the result is
    FAIL, or WARN when the item is a legacy exemption. Above ``warn_limit``
    (and not above the hard limit) the result is WARN.
    """
    if measured > hard_limit:
        return Status.WARN if legacy_exempt else Status.FAIL
    if warn_limit is not None and measured > warn_limit:
        return Status.WARN
    return Status.PASS
