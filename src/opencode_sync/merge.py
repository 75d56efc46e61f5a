"""Reconcile a served model catalog with the persisted opencode config.

The merge mirrors the server's catalog in ``provider.<id>.models`` while
leaving everything a user may have edited alone:

* a provider entry is created once; its ``npm`` and ``name`` are never
  rewritten afterwards,
* ``options.baseURL`` and, when a key is known, the ``Authorization`` header
  are refreshed on every run,
* new model ids are seeded with a display name and a ``tools`` flag, existing
  ones keep whatever values they already carry,
* model ids the server no longer reports are dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from opencode_sync.config import DEFAULT_SCHEMA_URL
from opencode_sync.models import ConfigDocument, ModelConfigEntry, ProviderConfigEntry, ProviderOptions
from opencode_sync.registry import GENERIC_ADAPTER, ProviderDescriptor

ToolsPolicy = Callable[[str], bool]

_NON_TOOL_MARKERS = ("embedding", "reranker")


def default_tools_policy(model_id: str) -> bool:
    """Guess whether a freshly discovered model supports tool calls."""
    lowered = model_id.lower()
    if any(marker in lowered for marker in _NON_TOOL_MARKERS):
        return False
    if "anthropic" in lowered and "claude" in lowered:
        return False
    return True


@dataclass(frozen=True, slots=True)
class MergeStats:
    added: int
    updated: int
    removed: int

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def new_document() -> ConfigDocument:
    return ConfigDocument(schema_url=DEFAULT_SCHEMA_URL, provider={})


def merge(
    document: ConfigDocument | None,
    provider_id: str,
    descriptor: ProviderDescriptor,
    base_url: str,
    api_key: str | None,
    model_ids: Iterable[str],
    tools_policy: ToolsPolicy = default_tools_policy,
) -> tuple[ConfigDocument, MergeStats]:
    if document is None:
        document = new_document()
    if document.schema_url is None:
        document.schema_url = DEFAULT_SCHEMA_URL
    if document.provider is None:
        document.provider = {}

    entry = _ensure_provider_entry(document.provider, provider_id, descriptor, base_url)

    if entry.options is None:
        entry.options = ProviderOptions(base_url=base_url)
    else:
        entry.options.base_url = base_url

    if api_key:
        if entry.options.headers is None:
            entry.options.headers = {}
        entry.options.headers["Authorization"] = f"Bearer {api_key}"

    if entry.models is None:
        entry.models = {}
    models = entry.models

    catalog = list(dict.fromkeys(model_ids))
    added = 0
    updated = 0
    for model_id in catalog:
        existing = models.get(model_id)
        if existing is None:
            models[model_id] = ModelConfigEntry(name=model_id, tools=tools_policy(model_id))
            added += 1
            continue

        if existing.name is None:
            existing.name = model_id
        if existing.tools is None:
            existing.tools = tools_policy(model_id)
        updated += 1

    served = set(catalog)
    stale = [model_id for model_id in models if model_id not in served]
    for model_id in stale:
        del models[model_id]

    return document, MergeStats(added=added, updated=updated, removed=len(stale))


def _ensure_provider_entry(
    providers: dict[str, ProviderConfigEntry | None],
    provider_id: str,
    descriptor: ProviderDescriptor,
    base_url: str,
) -> ProviderConfigEntry:
    entry = providers.get(provider_id)
    if entry is not None:
        return entry

    entry = ProviderConfigEntry(
        npm=descriptor.npm_package or GENERIC_ADAPTER,
        name=descriptor.name,
        options=ProviderOptions(base_url=base_url),
        models={},
    )
    providers[provider_id] = entry
    return entry
