"""Source loading for resolved modules."""

from .source_loader import EMPTY_MODULE
from .source_loader import SourceLoader
from .source_map import delete_comment

__all__ = ["EMPTY_MODULE", "SourceLoader", "delete_comment"]
