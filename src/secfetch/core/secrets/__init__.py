"""Secrets resolution: providers, placeholder grammar, caching and the line pipeline."""

from secfetch.core.secrets.base import (
    Placeholder,
    ResolutionOutcome,
    ResolutionStatus,
    SecretsProvider,
)
from secfetch.core.secrets.cache import SecretsCache, fingerprint
from secfetch.core.secrets.exceptions import (
    DeadlineExceededError,
    DecodeFailedError,
    EmptyPayloadError,
    FetchError,
    FetchFailedError,
    InputReadError,
    KeyNotFoundError,
    ResolutionError,
    SecfetchError,
    SecretNotFoundError,
    UnparseableBodyError,
)
from secfetch.core.secrets.grammar import find_placeholders, parse_placeholder
from secfetch.core.secrets.payload import extract_key
from secfetch.core.secrets.pipeline import LineResult, ResolutionPipeline
from secfetch.core.secrets.providers import (
    Base64Provider,
    EnvSecretsProvider,
    SecretsManagerProvider,
    SsmParameterProvider,
)
from secfetch.core.secrets.registry import build_providers

__all__ = [
    "Base64Provider",
    "DeadlineExceededError",
    "DecodeFailedError",
    "EmptyPayloadError",
    "EnvSecretsProvider",
    "FetchError",
    "FetchFailedError",
    "InputReadError",
    "KeyNotFoundError",
    "LineResult",
    "Placeholder",
    "ResolutionError",
    "ResolutionOutcome",
    "ResolutionPipeline",
    "ResolutionStatus",
    "SecfetchError",
    "SecretNotFoundError",
    "SecretsCache",
    "SecretsManagerProvider",
    "SecretsProvider",
    "SsmParameterProvider",
    "UnparseableBodyError",
    "build_providers",
    "extract_key",
    "find_placeholders",
    "fingerprint",
    "parse_placeholder",
]
