"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (CQRS), run through the mutation pipeline
- queries/   → Read operations (CQRS), loaded by the query coordinator
- sync/      → Query coordinator, mutation pipeline, invalidation router
- dto/       → Views handed to the rendering layer
- common/    → Shared interfaces (Command, Query base classes, MutationResult)

Rules:
- Depends on Domain layer and the cache store
- No rendering code here
"""
