from amnotifier.clients.http import ClientConfig, ClientConfigDocument, get_http_client

__all__ = ["ClientConfig", "ClientConfigDocument", "get_http_client"]
