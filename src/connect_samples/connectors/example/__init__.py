from .service import definitions

__all__ = ["definitions"]
