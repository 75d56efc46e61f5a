from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from opencode_sync.config import normalize_base_url
from opencode_sync.credentials import SecretLookup, resolve_api_key
from opencode_sync.document import load_document, write_document
from opencode_sync.fetcher import fetch_model_ids
from opencode_sync.merge import MergeStats, ToolsPolicy, default_tools_policy, merge
from opencode_sync.registry import ProviderDescriptor, get_provider
from opencode_sync.resolver import resolve_provider

logger = logging.getLogger(__name__)

ModelFetcher = Callable[..., list[str]]


class ServiceError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class SyncPlan:
    provider_id: str
    descriptor: ProviderDescriptor
    base_url: str
    api_key: str | None


@dataclass(frozen=True, slots=True)
class SyncResult:
    provider_id: str
    config_path: Path
    model_ids: tuple[str, ...]
    stats: MergeStats | None
    created: bool
    written: bool

    @property
    def empty(self) -> bool:
        return not self.model_ids


class ModelSyncService:
    """Runs one sync: load config, fetch models, merge, persist.

    The config file is written at most once, after the merge has completed
    in memory. Any failure before that leaves the file untouched.
    """

    def __init__(
        self,
        config_path: Path,
        fetcher: ModelFetcher = fetch_model_ids,
        tools_policy: ToolsPolicy = default_tools_policy,
    ) -> None:
        self._config_path = config_path
        self._fetcher = fetcher
        self._tools_policy = tools_policy

    @property
    def config_path(self) -> Path:
        return self._config_path

    def plan(
        self,
        base_url: str,
        provider_id: str | None = None,
        environ: Mapping[str, str] | None = None,
        secret_lookup: SecretLookup | None = None,
    ) -> SyncPlan:
        normalized = normalize_base_url(base_url)
        if not normalized:
            raise ServiceError("Base URL cannot be empty")

        if provider_id:
            descriptor = get_provider(provider_id)
            if descriptor is None:
                raise ServiceError(f"Unknown provider: {provider_id}")
        else:
            descriptor = resolve_provider(normalized)

        api_key = resolve_api_key(descriptor, environ, secret_lookup)
        return SyncPlan(
            provider_id=descriptor.id,
            descriptor=descriptor,
            base_url=normalized,
            api_key=api_key,
        )

    def sync(
        self,
        plan: SyncPlan,
        *,
        dry_run: bool = False,
        predefined: bool = False,
        timeout: float | None = None,
    ) -> SyncResult:
        document = load_document(self._config_path)
        created = document is None

        if predefined:
            if not plan.descriptor.default_models:
                raise ServiceError(f"Provider {plan.provider_id} has no predefined models")
            model_ids = list(plan.descriptor.default_models)
        else:
            model_ids = self._fetcher(plan.base_url, plan.api_key, timeout=timeout)

        if not model_ids:
            logger.info("No models reported by %s; leaving config untouched", plan.base_url)
            return SyncResult(
                provider_id=plan.provider_id,
                config_path=self._config_path,
                model_ids=(),
                stats=None,
                created=created,
                written=False,
            )

        merged, stats = merge(
            document,
            plan.provider_id,
            plan.descriptor,
            plan.base_url,
            plan.api_key,
            model_ids,
            self._tools_policy,
        )
        logger.debug(
            "Merged %s: added=%d updated=%d removed=%d",
            plan.provider_id,
            stats.added,
            stats.updated,
            stats.removed,
        )

        if not dry_run:
            write_document(self._config_path, merged)

        return SyncResult(
            provider_id=plan.provider_id,
            config_path=self._config_path,
            model_ids=tuple(model_ids),
            stats=stats,
            created=created,
            written=not dry_run,
        )
