from __future__ import annotations

from collections.abc import Mapping, Sequence

from opencode_sync.registry import (
    DETECTION_RULES,
    LOCAL_PROVIDER_ID,
    PROVIDERS,
    DetectionRule,
    ProviderDescriptor,
)


def resolve_provider(
    url: str | None,
    rules: Sequence[DetectionRule] = DETECTION_RULES,
    providers: Mapping[str, ProviderDescriptor] = PROVIDERS,
) -> ProviderDescriptor:
    """Return the provider a base URL belongs to.

    Rules are tried in order and the first predicate that matches the
    lowercased URL wins. Anything unmatched, including an empty URL, maps to
    the generic local provider.
    """
    fallback = providers[LOCAL_PROVIDER_ID]
    if not url:
        return fallback

    lowered = url.lower()
    for predicate, provider_id in rules:
        if predicate(lowered):
            return providers.get(provider_id, fallback)
    return fallback
