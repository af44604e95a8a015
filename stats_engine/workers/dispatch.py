"""Thread-pool dispatcher for analysis requests.

Requests are independent and stateless, so they run concurrently on a
``ThreadPoolExecutor``. Each submission returns a Future resolving to the
response dictionary produced by ``handle_message``.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Tuple

from .handlers import handle_message

logger = logging.getLogger(__name__)


class AnalysisDispatcher:
    """Run analysis requests on a pool of worker threads.

    Usage:
        with AnalysisDispatcher(max_workers=4) as dispatcher:
            future = dispatcher.submit("normality", payload)
            response = future.result()
    """

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="stats-engine"
        )

    def submit(self, kind: str, payload: Dict[str, Any]) -> "Future[Dict[str, Any]]":
        logger.debug("Submitting %s request", kind)
        return self._executor.submit(handle_message, kind, payload)

    def run_all(self, requests: Iterable[Tuple[str, Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Run several requests concurrently; responses keep the input order."""
        futures = [self.submit(kind, payload) for kind, payload in requests]
        return [future.result() for future in futures]

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AnalysisDispatcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
