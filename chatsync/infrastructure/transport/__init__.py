"""
Transport - httpx implementation of the backend port.
"""

from chatsync.infrastructure.transport.http_backend import HttpBackend

__all__ = ["HttpBackend"]
