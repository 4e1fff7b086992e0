"""
DOMAIN LAYER - Entities, value objects and pure decoding rules

This layer contains:
- Entities: Chat, Message, User, FileReference
- Value Objects: PrincipalId, ChatId, MessageId, FilePath, CacheKey
- Ports: BackendPort, the interface the transport implements
- Services: Entity codec (pure, no I/O)
- Exceptions: Engine error kinds

RULES:
1. NO framework imports
2. NO I/O operations
3. Only depends on Python stdlib
"""
