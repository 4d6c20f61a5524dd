"""Identifier derivation for graph nodes.

Node ids are derived from human-provided names (jobs, hooks, dependencies)
and must be usable as identifiers by every target backend. Derivation is a
pure function so repeated compilation yields identical ids.

Substitution table applied by sanitize_identifier():

    "-"   -> "__dash__"
    "."   -> "__dot__"
    " "   -> "__space__"
    other characters outside [A-Za-z0-9_] -> "__x<hex codepoint>__"

Distinct names can still map to the same id (e.g. "a-b" and "a__dash__b");
NodeBuilder detects such collisions.
"""

from __future__ import annotations

import re

SUBSTITUTIONS: dict[str, str] = {
    "-": "__dash__",
    ".": "__dot__",
    " ": "__space__",
}

_SAFE_CHAR = re.compile(r"[A-Za-z0-9_]")

TASK_ID_MAX_NAME_LENGTH = 200
"""Upstream names are truncated to this length inside sensor task ids."""


def sanitize_identifier(name: str) -> str:
    """Derive a target-safe identifier from a human-provided name.

    Args:
        name: Job, hook or dependency name.

    Returns:
        Identifier containing only [A-Za-z0-9_].

    Example:
        >>> sanitize_identifier("foo-intra-dep.job")
        'foo__dash__intra__dash__dep__dot__job'
    """
    parts: list[str] = []
    for char in name:
        if char in SUBSTITUTIONS:
            parts.append(SUBSTITUTIONS[char])
        elif _SAFE_CHAR.match(char):
            parts.append(char)
        else:
            parts.append(f"__x{ord(char):x}__")
    return "".join(parts)


def pod_name(name: str) -> str:
    """Kubernetes-friendly pod name: underscores become dashes."""
    return name.replace("_", "-")


def truncate(name: str, length: int = TASK_ID_MAX_NAME_LENGTH) -> str:
    """Truncate a name for use inside a scheduler task id."""
    return name[:length]
