from amnotifier.endpoint.models import Endpoint, Result

__all__ = ["Endpoint", "Result"]
