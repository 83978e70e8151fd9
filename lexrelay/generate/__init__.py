# Generator package

# Makes generate/ importable and exposes key interfaces.

from .dispatcher import Dispatcher, is_low_quality_answer
from .types import CompletionResult, ErrorKind, ModelParams, ProviderError
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "Dispatcher",
    "is_low_quality_answer",
    "CompletionResult",
    "ErrorKind",
    "ModelParams",
    "ProviderError",
    "EchoDevClient",
]
