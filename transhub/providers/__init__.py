"""Translation providers sharing a common async contract."""

from transhub.providers.base import TranslationProvider
from transhub.providers.database import DatabaseNamespaceProvider
from transhub.providers.file import FileNamespaceProvider
from transhub.providers.metrics import MetricsTracker

__all__ = [
    "DatabaseNamespaceProvider",
    "FileNamespaceProvider",
    "MetricsTracker",
    "TranslationProvider",
]
