"""
Chunked parallel execution.

An index range [0, size) is split into contiguous chunks that are handed to a
thread pool. Every chunk runs to completion before the call returns; the
first failure (in chunk order) is re-raised afterwards.
"""

import concurrent.futures
import logging
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

Chunk = Tuple[int, int]


def chunk(size: int, num_chunks: int) -> List[Chunk]:
    """
    Split [0, size) into at most num_chunks contiguous (start, count) ranges.

    Chunk sizes differ by at most one; earlier chunks take the remainder.

    Raises:
        ValueError: If size is negative or num_chunks is smaller than 1
    """
    if size < 0:
        raise ValueError(f"Cannot chunk a negative size: {size}")
    if num_chunks < 1:
        raise ValueError(f"Number of chunks must be at least 1, got {num_chunks}")
    if size == 0:
        return []

    num_chunks = min(num_chunks, size)
    base, remainder = divmod(size, num_chunks)
    chunks = []
    start = 0
    for i in range(num_chunks):
        count = base + (1 if i < remainder else 0)
        chunks.append((start, count))
        start += count
    return chunks


def run_chunks(task: Callable[[int, int], None], size: int, num_workers: int) -> None:
    """
    Run task(start, count) over the chunks of [0, size) on a thread pool.

    Args:
        task: Callable processing one chunk
        size: Total number of elements
        num_workers: Number of worker threads (and of chunks)

    Raises:
        Exception: The first chunk failure, after all chunks have finished
    """
    chunks = chunk(size, num_workers)
    if not chunks:
        return
    if len(chunks) == 1:
        task(*chunks[0])
        return

    logger.debug("Running %d chunks of %d elements on %d workers", len(chunks), size, num_workers)
    errors: Dict[int, BaseException] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(chunks)) as executor:
        future_to_chunk = {
            executor.submit(task, start, count): i
            for i, (start, count) in enumerate(chunks)
        }
        for future in concurrent.futures.as_completed(future_to_chunk):
            i = future_to_chunk[future]
            error = future.exception()
            if error is not None:
                logger.error("Chunk %d %s failed: %s", i, chunks[i], error)
                errors[i] = error

    if errors:
        raise errors[min(errors)]
