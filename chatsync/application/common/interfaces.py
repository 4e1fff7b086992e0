"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class DeleteChatCommand(Command[MutationResult[None]]):
        chat_id: ChatId
        scope: DeleteScope

    class DeleteChatHandler(CommandHandler[MutationResult[None]]):
        def __init__(self, backend: BackendPort, pipeline: MutationPipeline, router: InvalidationRouter):
            ...

        async def execute(self, command: DeleteChatCommand) -> MutationResult[None]:
            return await self._pipeline.execute(MutationSpec(...))
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")
class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
