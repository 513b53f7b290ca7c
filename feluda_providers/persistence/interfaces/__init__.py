from .repos import Exchange, IConversationRepo, ISettingsRepo, IUnitOfWork, StoredSettings

__all__ = ["Exchange", "StoredSettings", "IConversationRepo", "ISettingsRepo", "IUnitOfWork"]
