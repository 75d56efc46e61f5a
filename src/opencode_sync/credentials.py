from __future__ import annotations

import os
from collections.abc import Callable, Mapping

from opencode_sync.registry import ProviderDescriptor

SecretLookup = Callable[[str], str | None]


def resolve_api_key(
    descriptor: ProviderDescriptor,
    environ: Mapping[str, str] | None = None,
    secret_lookup: SecretLookup | None = None,
) -> str | None:
    """First non-empty credential for ``descriptor``.

    Environment variables are checked in the descriptor's order. When none is
    set, ``secret_lookup`` (keyed by provider id) is consulted if given.
    Returns ``None`` when nothing is configured.
    """
    env = os.environ if environ is None else environ
    for name in descriptor.env_vars:
        value = env.get(name)
        if value:
            return value

    if secret_lookup is not None:
        return secret_lookup(descriptor.id) or None
    return None
