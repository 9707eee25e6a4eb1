"""Evaluator helper modules for the monkey runtime."""

__all__ = [
    "blocks",
    "chains",
    "expr",
    "fn",
    "helpers",
    "objects",
]
