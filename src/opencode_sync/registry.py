"""Static table of the model providers opencode knows how to talk to."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Literal

AuthType = Literal["none", "optional", "api", "oauth", "aws", "multi"]

GENERIC_ADAPTER = "@ai-sdk/openai-compatible"
LOCAL_PROVIDER_ID = "local"


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    id: str
    name: str
    auth_type: AuthType
    api_base: str | None = None
    env_vars: tuple[str, ...] = ()
    npm_package: str | None = None
    models_endpoint: str | None = None
    is_local: bool = False
    default_models: tuple[str, ...] = ()
    notes: str = ""


def _build(*descriptors: ProviderDescriptor) -> dict[str, ProviderDescriptor]:
    table: dict[str, ProviderDescriptor] = {}
    for descriptor in descriptors:
        if descriptor.id in table:
            raise ValueError(f"Duplicate provider id: {descriptor.id}")
        table[descriptor.id] = descriptor
    return table


PROVIDERS: Mapping[str, ProviderDescriptor] = _build(
    # OAuth providers
    ProviderDescriptor(
        id="github-copilot",
        name="GitHub Copilot",
        auth_type="oauth",
        api_base="https://api.githubcopilot.com",
        env_vars=("GITHUB_COPILOT_TOKEN", "GITHUB_TOKEN"),
        notes="Requires a GitHub Copilot subscription. Uses device code flow.",
    ),
    ProviderDescriptor(
        id="github-copilot-enterprise",
        name="GitHub Copilot Enterprise",
        auth_type="oauth",
        api_base="https://copilot-api.{domain}",
        env_vars=("GITHUB_COPILOT_TOKEN", "GITHUB_TOKEN"),
        notes="Requires GitHub Enterprise with Copilot. Uses device code flow.",
    ),
    ProviderDescriptor(
        id="openai",
        name="OpenAI",
        auth_type="multi",
        api_base="https://api.openai.com/v1",
        env_vars=("OPENAI_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        notes="ChatGPT Plus/Pro OAuth or API key.",
    ),
    ProviderDescriptor(
        id="anthropic",
        name="Anthropic (Claude)",
        auth_type="multi",
        api_base="https://api.anthropic.com/v1",
        env_vars=("ANTHROPIC_API_KEY",),
        npm_package="@ai-sdk/anthropic",
        default_models=(
            "claude-sonnet-4-20250514",
            "claude-3-7-sonnet-20250219",
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
            "claude-3-haiku-20240307",
        ),
        notes="Claude Max OAuth (external plugin) or API key.",
    ),
    ProviderDescriptor(
        id="gitlab",
        name="GitLab Duo",
        auth_type="oauth",
        env_vars=("GITLAB_TOKEN",),
        notes="Uses the external GitLab OAuth plugin.",
    ),
    # API key providers
    ProviderDescriptor(
        id="google",
        name="Google (Gemini)",
        auth_type="api",
        api_base="https://generativelanguage.googleapis.com/v1beta",
        env_vars=("GOOGLE_API_KEY", "GEMINI_API_KEY"),
        npm_package="@ai-sdk/google",
        default_models=(
            "gemini-2.0-flash",
            "gemini-2.0-flash-lite",
            "gemini-1.5-pro",
            "gemini-1.5-flash",
            "gemini-1.5-flash-8b",
        ),
        notes="Google AI Studio API key.",
    ),
    ProviderDescriptor(
        id="openrouter",
        name="OpenRouter",
        auth_type="api",
        api_base="https://openrouter.ai/api/v1",
        env_vars=("OPENROUTER_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        notes="Aggregates many models under one API.",
    ),
    ProviderDescriptor(
        id="vercel",
        name="Vercel AI Gateway",
        auth_type="api",
        api_base="https://api.vercel.ai/v1",
        env_vars=("VERCEL_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        notes="Create an API key at https://vercel.link/ai-gateway-token",
    ),
    ProviderDescriptor(
        id="fireworks",
        name="Fireworks AI",
        auth_type="api",
        api_base="https://api.fireworks.ai/inference/v1",
        env_vars=("FIREWORKS_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="deepseek",
        name="DeepSeek",
        auth_type="api",
        api_base="https://api.deepseek.com/v1",
        env_vars=("DEEPSEEK_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="xai",
        name="xAI (Grok)",
        auth_type="api",
        api_base="https://api.x.ai/v1",
        env_vars=("XAI_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="cloudflare",
        name="Cloudflare Workers AI",
        auth_type="api",
        api_base="https://api.cloudflare.com/client/v4/accounts/{accountId}/ai",
        env_vars=("CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID"),
        npm_package=GENERIC_ADAPTER,
        notes="Requires CLOUDFLARE_ACCOUNT_ID.",
    ),
    ProviderDescriptor(
        id="cloudflare-ai-gateway",
        name="Cloudflare AI Gateway",
        auth_type="api",
        api_base="https://gateway.ai.cloudflare.com/v1/{accountId}/{gatewayId}",
        env_vars=("CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID", "CLOUDFLARE_GATEWAY_ID"),
        npm_package=GENERIC_ADAPTER,
        notes="Requires CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_GATEWAY_ID.",
    ),
    ProviderDescriptor(
        id="amazon-bedrock",
        name="Amazon Bedrock",
        auth_type="aws",
        env_vars=("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION"),
        npm_package="@ai-sdk/amazon-bedrock",
        notes="Bearer token > profile > access keys > IAM roles > EKS IRSA.",
    ),
    ProviderDescriptor(
        id="azure",
        name="Azure OpenAI",
        auth_type="api",
        api_base="https://{resourceName}.openai.azure.com",
        env_vars=("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT"),
        npm_package="@ai-sdk/azure",
        notes="Requires a deployment name.",
    ),
    ProviderDescriptor(
        id="groq",
        name="Groq",
        auth_type="api",
        api_base="https://api.groq.com/openai/v1",
        env_vars=("GROQ_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="together",
        name="Together AI",
        auth_type="api",
        api_base="https://api.together.xyz/v1",
        env_vars=("TOGETHER_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="mistral",
        name="Mistral AI",
        auth_type="api",
        api_base="https://api.mistral.ai/v1",
        env_vars=("MISTRAL_API_KEY",),
        npm_package="@ai-sdk/mistral",
        models_endpoint="/v1/models",
    ),
    ProviderDescriptor(
        id="cohere",
        name="Cohere",
        auth_type="api",
        api_base="https://api.cohere.ai/v1",
        env_vars=("COHERE_API_KEY",),
        npm_package="@ai-sdk/cohere",
        default_models=("command-r-plus", "command-r", "command-light", "command"),
    ),
    ProviderDescriptor(
        id="perplexity",
        name="Perplexity",
        auth_type="api",
        api_base="https://api.perplexity.ai",
        env_vars=("PERPLEXITY_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        default_models=(
            "llama-3.1-sonar-small-128k-online",
            "llama-3.1-sonar-large-128k-online",
        ),
    ),
    # Local / self-hosted
    ProviderDescriptor(
        id="ollama",
        name="Ollama",
        auth_type="none",
        api_base="http://localhost:11434/v1",
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        is_local=True,
    ),
    ProviderDescriptor(
        id="lmstudio",
        name="LM Studio",
        auth_type="none",
        api_base="http://localhost:1234/v1",
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        is_local=True,
    ),
    ProviderDescriptor(
        id="vllm",
        name="vLLM",
        auth_type="none",
        api_base="http://localhost:8000/v1",
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        is_local=True,
    ),
    ProviderDescriptor(
        id=LOCAL_PROVIDER_ID,
        name="Local OpenAI-Compatible",
        auth_type="optional",
        env_vars=("LOCAL_API_KEY",),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        is_local=True,
        notes="Generic endpoint configured via LOCAL_API_BASE.",
    ),
    ProviderDescriptor(
        id="alibaba",
        name="Alibaba DashScope",
        auth_type="api",
        api_base="https://dashscope.aliyuncs.com/compatible-mode/v1",
        env_vars=("DASHSCOPE_API_KEY", "ALIBABA_API_KEY"),
        npm_package=GENERIC_ADAPTER,
        models_endpoint="/v1/models",
        notes="Qwen and other DashScope models.",
    ),
)

PROVIDER_PRIORITY: Mapping[str, int] = {
    "github-copilot": 0,
    "anthropic": 1,
    "openai": 2,
    "google": 3,
    "openrouter": 4,
    "fireworks": 5,
    "vercel": 6,
    "deepseek": 7,
    "xai": 8,
    "groq": 9,
    "together": 10,
    "mistral": 11,
    "gitlab": 12,
    "amazon-bedrock": 13,
    "azure": 14,
    "cloudflare": 15,
    "cohere": 16,
    "perplexity": 17,
    "alibaba": 18,
    "ollama": 50,
    "lmstudio": 51,
    "vllm": 52,
    LOCAL_PROVIDER_ID: 99,
}

UrlPredicate = Callable[[str], bool]
DetectionRule = tuple[UrlPredicate, str]


def contains_any(*needles: str) -> UrlPredicate:
    """Predicate matching a lowercased URL that contains any of ``needles``."""

    def predicate(url: str) -> bool:
        return any(needle in url for needle in needles)

    return predicate


def _local_port(port: int) -> UrlPredicate:
    return contains_any(f"localhost:{port}", f"127.0.0.1:{port}")


# Evaluated top to bottom; the first match wins.
DETECTION_RULES: tuple[DetectionRule, ...] = (
    (contains_any("api.openai.com"), "openai"),
    (contains_any("api.anthropic.com"), "anthropic"),
    (contains_any("api.fireworks.ai"), "fireworks"),
    (contains_any("api.x.ai"), "xai"),
    (contains_any("api.deepseek.com"), "deepseek"),
    (contains_any("api.groq.com"), "groq"),
    (contains_any("api.together.xyz"), "together"),
    (contains_any("api.mistral.ai"), "mistral"),
    (contains_any("openrouter.ai"), "openrouter"),
    (contains_any("api.perplexity.ai"), "perplexity"),
    (contains_any("api.cohere.ai"), "cohere"),
    (contains_any("generativelanguage.googleapis.com"), "google"),
    (contains_any("openai.azure.com"), "azure"),
    (contains_any("api.cloudflare.com"), "cloudflare"),
    (contains_any("gateway.ai.cloudflare.com"), "cloudflare-ai-gateway"),
    (contains_any("api.vercel.ai"), "vercel"),
    (_local_port(11434), "ollama"),
    (_local_port(1234), "lmstudio"),
    (_local_port(8000), "vllm"),
    (contains_any("githubcopilot.com"), "github-copilot"),
    (contains_any("dashscope"), "alibaba"),
)


def get_provider(provider_id: str) -> ProviderDescriptor | None:
    return PROVIDERS.get(provider_id)


def all_providers() -> list[ProviderDescriptor]:
    return sorted(
        PROVIDERS.values(),
        key=lambda descriptor: (PROVIDER_PRIORITY.get(descriptor.id, 99), descriptor.name),
    )


def openai_compatible_providers() -> list[ProviderDescriptor]:
    return [descriptor for descriptor in all_providers() if descriptor.models_endpoint]


def configured_providers(environ: Mapping[str, str] | None = None) -> list[ProviderDescriptor]:
    """Providers usable right now: local ones, keyless ones, or ones with a credential set."""
    env = os.environ if environ is None else environ
    configured: list[ProviderDescriptor] = []
    for descriptor in all_providers():
        if descriptor.is_local or not descriptor.env_vars:
            configured.append(descriptor)
        elif any(env.get(name) for name in descriptor.env_vars):
            configured.append(descriptor)
    return configured


def requires_auth(descriptor: ProviderDescriptor) -> bool:
    return descriptor.auth_type not in {"none", "optional"}
