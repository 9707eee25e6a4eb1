"""monkey: lexer, Pratt parser and tree-walking evaluator."""

__version__ = "0.1.0"
