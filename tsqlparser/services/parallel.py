"""
Parse several scripts concurrently.

Each parse is independent and owns all of its state, so scripts can be
handed to worker threads without coordination. The dialect tables are the
only shared data and are read-only once loaded.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from tsqlparser.config import settings
from tsqlparser.models.script import Script
from tsqlparser.services.script_parser import parse
from tsqlparser.utils.logging import get_logger

logger = get_logger(__name__)


def parse_many(
    sources: Iterable[str],
    max_workers: Optional[int] = None,
    quoted_identifier: Optional[bool] = None,
) -> List[Script]:
    """
    Parse scripts on a thread pool.

    Args:
        sources: Script texts
        max_workers: Pool size; defaults to ``settings.max_workers``
        quoted_identifier: Passed through to every parse

    Returns:
        One Script per source, in input order
    """
    scripts = list(sources)
    workers = max_workers or settings.max_workers
    logger.info(f"Parsing {len(scripts)} scripts with {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(parse, source, quoted_identifier, f"script-{i}")
            for i, source in enumerate(scripts)
        ]
        return [future.result() for future in futures]


async def parse_many_async(
    sources: Iterable[str],
    max_workers: Optional[int] = None,
    quoted_identifier: Optional[bool] = None,
) -> List[Script]:
    """
    Parse scripts from async code without blocking the event loop.

    At most ``max_workers`` parses run at the same time. Results keep the
    input order; the first failing parse propagates its exception.
    """
    scripts = list(sources)
    semaphore = asyncio.Semaphore(max_workers or settings.max_workers)

    async def parse_one(index: int, source: str) -> Script:
        async with semaphore:
            return await asyncio.to_thread(parse, source, quoted_identifier, f"script-{index}")

    tasks = [parse_one(i, source) for i, source in enumerate(scripts)]
    return list(await asyncio.gather(*tasks))
