from chatsync.application.dto.entity_view import EntityView

__all__ = ["EntityView"]
