from .me import MeSerializer

__all__ = ["MeSerializer"]
