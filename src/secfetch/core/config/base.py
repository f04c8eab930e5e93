"""Base types and enums for configuration models."""

from enum import Enum


class ProviderName(str, Enum):
    """Built-in secret providers, in their default resolution order."""

    SSM = "ssm"
    SECRETS = "secrets"
    ENV = "env"
    BASE64 = "base64"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
