"""Domain-specific exceptions."""


class TranslationError(Exception):
    pass


class NamespaceLoadError(TranslationError):
    pass


class InvalidMetricsAction(TranslationError):
    pass
