"""Concurrent dependency closure over the retained set.

Products are handed to a fixed pool of worker threads through a bounded queue.
A worker asks the registry for the direct dependencies of its product and
claims each one through RetainedSet.insert_if_absent(); only the claiming
worker schedules the new product, so every product's dependency query is
issued exactly once no matter how many paths lead to it.

Newly claimed products go back onto the shared queue. When the queue is full
the worker keeps them on a private backlog and drains that first, so no worker
ever blocks waiting on another one. An in-flight counter tracks scheduled but
unfinished products; when it drops to zero the closure is complete and the
pool is shut down with one stop sentinel per worker.
"""

import logging
import queue
import threading
from dataclasses import dataclass, field

from stacktools.core.eups.abc import Eups
from stacktools.core.listing import parse_dependency_listing
from stacktools.core.report import QueryFailure
from stacktools.core.retained_set import RetainedSet

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4

_STOP = object()


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a resolution run.

    Attributes:
        discovered: Products added to the retained set beyond the seed
        query_failures: Dependency queries that failed and were treated as empty
    """

    discovered: list[str] = field(default_factory=list)
    query_failures: list[QueryFailure] = field(default_factory=list)


class DependencyResolver:
    """Grow a seeded RetainedSet until it holds the full dependency closure."""

    def __init__(self, eups: Eups, workers: int = DEFAULT_WORKERS) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._eups = eups
        self._workers = workers

    def resolve(self, retained: RetainedSet) -> ResolutionResult:
        """Add every transitive dependency of the current contents of ``retained``.

        Blocks until the closure is complete. A failed or empty dependency query
        counts as "no further dependencies".

        Raises:
            Exception: The first unexpected error raised inside a worker, after
                all workers have stopped
        """
        run = _ResolutionRun(self._eups, retained, self._workers)
        return run.execute(retained.products())


class _ResolutionRun:
    """State for one resolve() call, shared by its worker threads."""

    def __init__(self, eups: Eups, retained: RetainedSet, workers: int) -> None:
        self._eups = eups
        self._retained = retained
        self._workers = workers
        self._queue: queue.Queue[object] = queue.Queue(maxsize=workers)
        self._lock = threading.Lock()
        self._idle = threading.Event()
        self._in_flight = 0
        self._discovered: list[str] = []
        self._failures: list[QueryFailure] = []
        self._errors: list[BaseException] = []

    def execute(self, seeds: list[str]) -> ResolutionResult:
        if not seeds:
            return ResolutionResult()

        self._in_flight = len(seeds)
        threads = [
            threading.Thread(target=self._work, name=f"resolver-{i}", daemon=True)
            for i in range(self._workers)
        ]
        for thread in threads:
            thread.start()

        for product in seeds:
            self._queue.put(product)

        self._idle.wait()
        for _ in threads:
            self._queue.put(_STOP)
        for thread in threads:
            thread.join()

        if self._errors:
            raise self._errors[0]

        logger.debug(
            "Resolution finished: %d seeded, %d discovered, %d failed queries",
            len(seeds),
            len(self._discovered),
            len(self._failures),
        )
        return ResolutionResult(
            discovered=list(self._discovered),
            query_failures=list(self._failures),
        )

    def _work(self) -> None:
        backlog: list[str] = []
        while True:
            if backlog:
                product = backlog.pop()
            else:
                item = self._queue.get()
                if item is _STOP:
                    return
                product = str(item)
            try:
                self._process(product, backlog)
            except Exception as e:
                logger.debug("Resolver worker failed on %s", product, exc_info=True)
                with self._lock:
                    self._errors.append(e)
            finally:
                self._finish_one()

    def _process(self, product: str, backlog: list[str]) -> None:
        version = self._retained.get(product)
        if version is None:
            return

        result = self._eups.list_dependencies(product, version)
        if not result.success:
            detail = result.stderr.strip()
            logger.warning(
                "Dependency query failed for %s %s, treating as no dependencies: %s",
                product,
                version,
                detail,
            )
            with self._lock:
                self._failures.append(
                    QueryFailure(
                        operation="list_dependencies",
                        subject=f"{product} {version}",
                        detail=detail,
                    )
                )
            return

        for edge in parse_dependency_listing(result.lines()):
            if self._retained.insert_if_absent(edge.product, edge.version):
                logger.debug("Discovered %s %s via %s", edge.product, edge.version, product)
                self._schedule(edge.product, backlog)

    def _schedule(self, product: str, backlog: list[str]) -> None:
        with self._lock:
            self._in_flight += 1
            self._discovered.append(product)
        try:
            self._queue.put_nowait(product)
        except queue.Full:
            backlog.append(product)

    def _finish_one(self) -> None:
        with self._lock:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()
