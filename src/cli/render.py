from __future__ import annotations

import sys

from rich.console import Console

# Command output (tables, dumps). Logs use their own stderr console.
RENDER = Console(file=sys.stdout, soft_wrap=True)
