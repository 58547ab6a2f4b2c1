"""Platform abstraction layer (processes and files)."""

from .files import (
    atomic_write_text,
    make_private_dir,
    remove_tree,
)
from .process import (
    ProcessError,
    run,
    run_logged,
)

__all__ = [
    # files
    "atomic_write_text",
    "make_private_dir",
    "remove_tree",
    # process
    "ProcessError",
    "run",
    "run_logged",
]
