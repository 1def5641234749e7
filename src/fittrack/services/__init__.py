"""Services for fittrack."""

from .cascade import BATCH_SAFETY_THRESHOLD, BatchWriter, CascadeOperator, collect_descendants
from .program_import import import_program_tree

__all__ = [
    "BATCH_SAFETY_THRESHOLD",
    "BatchWriter",
    "CascadeOperator",
    "collect_descendants",
    "import_program_tree",
]
