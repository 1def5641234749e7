"""CLI commands for fittrack."""

from .delete import delete
from .init import init
from .programs import programs
from .serve import serve
from .weeks import weeks

__all__ = [
    "delete",
    "init",
    "programs",
    "serve",
    "weeks",
]
