from .base import LanguageModel, ModelDescriptor, ProviderOptions
from .stub import StubLanguageModel

__all__ = ["LanguageModel", "ModelDescriptor", "ProviderOptions", "StubLanguageModel"]
