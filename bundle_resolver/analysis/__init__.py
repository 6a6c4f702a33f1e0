"""Parsing, transformation and dependency discovery for loaded modules."""

from .parser import JavaScriptParser
from .parser import Parser
from .transformer import Transform
from .transformer import TransformContext
from .transformer import Transformer
from .transformer import load_transform
from .walker import DependencyWalker

__all__ = [
    "DependencyWalker",
    "JavaScriptParser",
    "Parser",
    "Transform",
    "TransformContext",
    "Transformer",
    "load_transform",
]
