"""
Shared helpers for maintenance scripts.

Scripts can be run directly (python scripts/foo.py) or as modules
(python -m scripts.foo); importing this module first makes the backend
packages importable in both cases.

Usage:
    from scripts._common import script_repositories

    async with script_repositories() as repos:
        ...
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

BACKEND_ROOT = Path(__file__).parent.parent
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from db.session import async_session_maker  # noqa: E402
from repositories.provider import Repositories  # noqa: E402


@asynccontextmanager
async def script_repositories() -> AsyncIterator[Repositories]:
    """Open a session for a script run and close it afterwards."""
    async with async_session_maker() as db:
        yield Repositories.from_session(db)
