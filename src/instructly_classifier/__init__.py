"""Instructly topic classification service following Clean Architecture layering."""

from .core.container import DIContainer
from .core.engine import ClassificationEngine
from .core.service import ClassificationService

__all__ = [
    "ClassificationEngine",
    "ClassificationService",
    "DIContainer",
    "domain",
    "routing",
    "core",
    "providers",
    "backends",
    "cache",
    "analytics",
    "utils",
]
