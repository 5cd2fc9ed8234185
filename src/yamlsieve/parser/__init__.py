"""YAML token stream: CST building, token reconstruction, comments and lines."""

from yamlsieve.parser.cst import CSTBuilder, CSTNode, build_cst
from yamlsieve.parser.reconstruct import LineIndex, TokenReconstructor, reconstruct
from yamlsieve.parser.stream import (
    StreamElement,
    comments_between_tokens,
    iter_elements,
    iter_lines,
    iter_tokens_and_comments,
)

__all__ = [
    "CSTBuilder",
    "CSTNode",
    "LineIndex",
    "StreamElement",
    "TokenReconstructor",
    "build_cst",
    "comments_between_tokens",
    "iter_elements",
    "iter_lines",
    "iter_tokens_and_comments",
    "reconstruct",
]
