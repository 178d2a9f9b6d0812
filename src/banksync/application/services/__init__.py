"""Application services."""

from banksync.application.services.record_normalizer import RecordNormalizer

__all__ = [
    "RecordNormalizer",
]
