from transhub.db.models.translations import Locale, Namespace, Translation

__all__ = ["Locale", "Namespace", "Translation"]
