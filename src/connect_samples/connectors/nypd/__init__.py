from .client import NypdClient
from .service import NypdConnector

__all__ = ["NypdClient", "NypdConnector"]
