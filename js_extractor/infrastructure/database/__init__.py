from .base import Base
from .models import ExtractionJobModel, ScriptFileModel

__all__ = [
    "Base",
    "ExtractionJobModel",
    "ScriptFileModel",
]
