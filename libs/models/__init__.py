from .base_model_mixin import BaseModel

__all__ = ["BaseModel"]
