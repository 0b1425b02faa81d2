# VSSYNC Output Module
# Rich console output

from vssync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
