"""
chatsync - client-side cache and optimistic synchronization engine
for a polled messaging backend.
"""

__version__ = "0.1.0"
