"""Domain layer for rcdash application.

Services are imported lazily: the database layer imports domain entities,
and the services import the database layer.
"""

_SERVICES = {
    "ApplicationService": "rcdash.domain.application",
    "ClassificationResolver": "rcdash.domain.classification",
    "DictionaryUploadService": "rcdash.domain.dictionary_upload",
    "ReconciliationService": "rcdash.domain.reconciliation",
    "SuccessRateUploadService": "rcdash.domain.success_rate_upload",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
