from .extraction_models import ExtractionJobModel, ScriptFileModel

__all__ = [
    "ExtractionJobModel",
    "ScriptFileModel",
]
