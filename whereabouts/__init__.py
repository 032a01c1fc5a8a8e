"""IP address allocation over ranges, IP pool resource types and pool consistency helpers."""

__version__ = "0.1.0"
__all__ = [
    "allocate",
    "api",
    "entities",
    "poolconsistency",
    "retrievers",
    "testenvironment",
]