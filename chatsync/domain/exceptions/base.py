class ChatSyncError(Exception):
    """Base class for every error the sync engine raises on purpose."""
