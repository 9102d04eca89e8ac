"""Remote drive hierarchy mirror with a bounded-staleness cache.

``TreeCacheSync`` turns the upstream "list children of a folder" call into
either a fully materialized tree for a root folder or a one-level listing for
a single folder. Both are cached per key with a fixed TTL.

Deep traversal runs breadth-first: every folder of a level is listed on a
bounded worker pool, and the tree is assembled post-order once every listing
is known. A failing sub-folder listing degrades that branch only; a failing
root listing fails the whole call and nothing is cached. The upstream
hierarchy is assumed to be a tree (no cycles).
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from course_drive.errors import ConfigError, DriveSyncError, UpstreamError
from course_drive.logging_config import get_logger, log_event
from course_drive.models import Node, is_folder_mime
from course_drive.services.cache_store import TreeCache, folder_key, structure_key


@dataclass(frozen=True)
class BranchOutcome:
    """Result of listing one folder during a deep traversal."""

    ok: bool
    entries: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    reason: str = ''

    @classmethod
    def success(cls, entries):
        return cls(ok=True, entries=tuple(entries))

    @classmethod
    def degraded(cls, reason):
        return cls(ok=False, reason=str(reason))


def _require_id(value, label):
    cleaned = str(value or '').strip()
    if not cleaned:
        raise ConfigError(f'{label} is required')
    return cleaned


class TreeCacheSync:
    def __init__(
        self,
        listing_client,
        cache: TreeCache,
        *,
        max_workers: int = 4,
        cache_degraded_trees: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.listing_client = listing_client
        self.cache = cache
        self.max_workers = max(1, int(max_workers))
        self.cache_degraded_trees = cache_degraded_trees
        self.logger = logger or get_logger('tree_sync')
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='drive-listing')
        self._inflight: Dict[str, Future] = {}
        self._inflight_lock = threading.Lock()

    # Public operations

    def get_complete_structure(self, root_id) -> Tuple[Node, ...]:
        root_id = _require_id(root_id, 'Root folder id')
        return self._cached(structure_key(root_id), lambda: self._traverse(root_id))

    def get_folder_contents(self, folder_id) -> Tuple[Node, ...]:
        folder_id = _require_id(folder_id, 'Folder id')
        return self._cached(folder_key(folder_id), lambda: self._fetch_shallow(folder_id))

    def invalidate_all(self) -> None:
        with self._inflight_lock:
            removed = self.cache.clear()
            self._inflight.clear()
        log_event(logging.INFO, 'drive_cache_cleared', logger=self.logger, removed_entries=removed)

    def stats(self):
        with self._inflight_lock:
            inflight = len(self._inflight)
        stats = self.cache.stats()
        stats['inflight_fetches'] = inflight
        stats['max_concurrent_listings'] = self.max_workers
        return stats

    def close(self):
        self._executor.shutdown(wait=False)

    # Cache plumbing

    def _cached(self, key, fetch):
        entry = self.cache.get(key)
        if entry is not None:
            self.logger.debug(f"Drive cache hit for {key}")
            return entry.nodes

        with self._inflight_lock:
            entry = self.cache.get(key)
            if entry is not None:
                return entry.nodes
            future = self._inflight.get(key)
            is_leader = future is None
            if is_leader:
                future = Future()
                self._inflight[key] = future
                generation = self.cache.generation

        if not is_leader:
            self.logger.debug(f"Joining in-flight drive fetch for {key}")
            return future.result()

        try:
            nodes, cacheable = fetch()
            if cacheable:
                self.cache.put(key, nodes, generation=generation)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(nodes)
            return nodes
        finally:
            with self._inflight_lock:
                if self._inflight.get(key) is future:
                    del self._inflight[key]

    # Upstream access

    def _list(self, folder_id) -> List[Dict[str, Any]]:
        try:
            return list(self.listing_client.list_children(folder_id))
        except DriveSyncError:
            raise
        except Exception as exc:
            raise UpstreamError(f"Drive listing failed for folder {folder_id}: {exc}", folder_id=folder_id) from exc

    def _list_on_pool(self, folder_id):
        return self._executor.submit(self._list, folder_id).result()

    def _list_branch(self, folder_id) -> BranchOutcome:
        try:
            return BranchOutcome.success(self._list(folder_id))
        except Exception as exc:
            log_event(
                logging.WARNING,
                'drive_branch_degraded',
                logger=self.logger,
                folder_id=folder_id,
                reason=str(exc),
            )
            return BranchOutcome.degraded(exc)

    def _fetch_shallow(self, folder_id):
        entries = self._list_on_pool(folder_id)
        return tuple(Node.from_drive_file(raw) for raw in entries), True

    # Traversal

    @staticmethod
    def _child_folder_ids(entries):
        return [str(raw.get('id', '')) for raw in entries if is_folder_mime(raw.get('mimeType')) and raw.get('id')]

    def _traverse(self, root_id):
        started = time.monotonic()
        root_entries = self._list_on_pool(root_id)

        outcomes: Dict[str, BranchOutcome] = {}
        frontier = self._child_folder_ids(root_entries)
        while frontier:
            level = [folder_id for folder_id in dict.fromkeys(frontier) if folder_id not in outcomes]
            pending = [(folder_id, self._executor.submit(self._list_branch, folder_id)) for folder_id in level]
            frontier = []
            for folder_id, pending_outcome in pending:
                outcome = pending_outcome.result()
                outcomes[folder_id] = outcome
                if outcome.ok:
                    frontier.extend(self._child_folder_ids(outcome.entries))

        nodes = self._assemble(root_entries, outcomes)
        degraded = sorted(folder_id for folder_id, outcome in outcomes.items() if not outcome.ok)
        log_event(
            logging.INFO,
            'drive_structure_traversed',
            logger=self.logger,
            root_id=root_id,
            folders_listed=len(outcomes) + 1,
            degraded_folders=degraded,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        cacheable = self.cache_degraded_trees or not degraded
        if not cacheable:
            self.logger.warning(f"Not caching degraded structure for {root_id}")
        return nodes, cacheable

    def _assemble(self, entries, outcomes) -> Tuple[Node, ...]:
        nodes = []
        for raw in entries:
            if not is_folder_mime(raw.get('mimeType')):
                nodes.append(Node.from_drive_file(raw))
                continue
            outcome = outcomes.get(str(raw.get('id', '')))
            if outcome is not None and outcome.ok:
                nodes.append(Node.from_drive_file(raw, children=self._assemble(outcome.entries, outcomes)))
            else:
                nodes.append(Node.from_drive_file(raw, children=(), degraded=True))
        return tuple(nodes)
