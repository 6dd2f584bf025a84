from .base import InferenceAdapter, sanitize_indices

__all__ = ["InferenceAdapter", "sanitize_indices"]
