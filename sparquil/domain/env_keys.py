"""Env key grammar: which store keys the environment mirror may cache.

A valid key is the literal namespace ``env``, optional ``.``-delimited
sub-namespaces, a ``/`` and a final name, e.g. ``env/color`` or
``env.display/width``. Matching is case-sensitive and ASCII-only.
"""

import re

from sparquil.core.constants import ENV_NAMESPACE

ENV_KEY_RE = re.compile(
    rf"{re.escape(ENV_NAMESPACE)}(?:\.[\w-]+)*/[\w-]+",
    re.ASCII,
)


def is_valid_env_key(key: object) -> bool:
    """Return True if key is a string in the env key grammar."""
    return isinstance(key, str) and ENV_KEY_RE.fullmatch(key) is not None
