from chatsync.setup.ioc.container import AppProvider, HttpBackendProvider, create_container

__all__ = ["AppProvider", "HttpBackendProvider", "create_container"]
