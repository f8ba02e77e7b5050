"""Evaluator helper modules for the Monkey runtime."""

__all__ = [
    "blocks",
    "expr",
    "fn",
    "helpers",
]
