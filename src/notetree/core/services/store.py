from __future__ import annotations

"""
Note Store Service.

Owns the live document tree, its shadow trees and the installed storage
provider. All tree mutations are serialized by a single re-entrant lock;
provider I/O runs outside the lock, and content saves are dispatched to a
worker pool so several files can be persisted concurrently.

Structural operations validate locally, call the provider, then apply
the change, so a provider failure never leaves a partial mutation behind.
Saves clear the unsaved flag optimistically before dispatch and restore
it when the provider fails, which keeps edits made while a save is in
flight from being lost.
"""

import copy
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from notetree.core.tree.mutations import (
    check_delete,
    check_insert,
    check_move,
    check_rename,
    delete_node,
    get_file,
    insert_node,
    move_node,
    rename_node,
    set_file_content,
)
from notetree.core.tree.naming import get_collision_free_name, is_valid_name
from notetree.core.tree.operations import (
    get_tree_node,
    has_tree_node_children,
    remove_tree_node,
)
from notetree.core.tree.paths import format_path, resolve_path
from notetree.core.tree.shadow import FlagTree, ShadowTrees, is_flag_set, set_flag
from notetree.domain import constants as const
from notetree.domain.errors import InvalidNameError, InvalidPathError, NoteStoreError, NotFoundError
from notetree.domain.node_models import DirectoryNode, Node, create_root
from notetree.domain.result_models import (
    OperationResult,
    SaveManySummary,
    create_error_result,
    create_success_result,
)
from notetree.domain.tree_models import Path
from notetree.infra.providers import StorageProvider, create_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """
    Detached copy of the store state for readers.

    Attributes:
        root: Deep copy of the document root.
        shadows: Deep copy of every shadow tree.
        is_fetching: Whether a full reload is in progress.
        fetch_error: Message of the last failed reload, if any.
        save_pending: Whether at least one save is in flight.
    """
    root: DirectoryNode
    shadows: ShadowTrees
    is_fetching: bool
    fetch_error: Optional[str]
    save_pending: bool


class NoteStore:
    """
    Central mutable state of a note editing session.

    Callers hold one instance and invoke operations against it. Every
    operation returns an ``OperationResult`` instead of raising store
    errors.
    """

    def __init__(
            self,
            provider: Optional[StorageProvider] = None,
            max_workers: int = const.DEFAULT_SAVE_WORKERS,
            flash_timeout: float = const.DEFAULT_FLASH_TIMEOUT
    ) -> None:
        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="SaveWorker")
        self._provider = provider
        self._flash_timeout = flash_timeout
        self._timers: List[threading.Timer] = []
        self._pending_saves = 0

        self.root: DirectoryNode = create_root()
        self.shadows = ShadowTrees()
        self.is_fetching = False
        self.fetch_error: Optional[str] = None

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "NoteStore":
        """Build a store with the provider and limits from a validated config."""
        return cls(
            provider=create_provider(cfg),
            max_workers=cfg["save_workers"],
            flash_timeout=cfg["flash_timeout"],
        )

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def __enter__(self) -> "NoteStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Cancel pending highlight timers and wait for in-flight saves."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        self._executor.shutdown(wait=True)

    @property
    def provider(self) -> Optional[StorageProvider]:
        return self._provider

    @property
    def save_pending(self) -> bool:
        with self._lock:
            return self._pending_saves > 0

    def set_provider(self, provider: Optional[StorageProvider]) -> None:
        """Install another provider and discard all state of the previous one."""
        with self._lock:
            self._provider = provider
            self._reset_state()
        logger.info(f"Storage provider changed: {getattr(provider, 'description', None) or 'none'}")

    def logout(self) -> OperationResult:
        """Log out of the current provider and discard all state."""
        try:
            self._require_provider().logout()
        except NoteStoreError as e:
            return self._fail("log out", e, [])

        self.set_provider(None)
        return create_success_result()

    def snapshot(self) -> StoreSnapshot:
        """Return a deep copy of the current state."""
        with self._lock:
            return StoreSnapshot(
                root=copy.deepcopy(self.root),
                shadows=copy.deepcopy(self.shadows),
                is_fetching=self.is_fetching,
                fetch_error=self.fetch_error,
                save_pending=self._pending_saves > 0,
            )

    # -------------------------------------------------------------------------
    # DOCUMENT OPERATIONS
    # -------------------------------------------------------------------------

    def fetch_nodes(self) -> OperationResult:
        """
        Replace the document tree with the provider's content.

        A fetched tree is authoritative, so every unsaved flag is dropped.
        On failure the current tree is kept and ``fetch_error`` is set.
        """
        with self._lock:
            self.is_fetching = True
            self.fetch_error = None

        try:
            nodes = self._require_provider().fetch_nodes()
        except NoteStoreError as e:
            with self._lock:
                self.is_fetching = False
                self.fetch_error = str(e)
            return self._fail("load nodes", e, [])

        with self._lock:
            self.is_fetching = False
            self.root.children = {node.name: node for node in nodes}
            remove_tree_node(self.shadows.unsaved, [])

        logger.info(f"Loaded {len(nodes)} top-level nodes.")
        return create_success_result([], data=nodes)

    def add_node(self, parent_path: Path, node: Node) -> OperationResult:
        """
        Create ``node`` in the directory at ``parent_path``.

        Duplicate names are rejected; see ``add_node_collision_free``.
        """
        if not is_valid_name(node.name):
            return self._fail("add node", self._invalid_name(node.name), parent_path)

        try:
            with self._lock:
                check_insert(self.root, parent_path, node.name)

            confirmed_parent, stored = self._require_provider().add_node(parent_path, node)

            with self._lock:
                new_path = insert_node(self.root, confirmed_parent, stored)
        except NoteStoreError as e:
            return self._fail("add node", e, parent_path)

        logger.info(f"Added {format_path(new_path)}")
        return create_success_result(new_path, data=stored)

    def add_node_collision_free(
            self,
            parent_path: Path,
            node: Node,
            start_editing: bool = False
    ) -> OperationResult:
        """
        Create ``node`` under a sibling-unique variant of its name.

        ``"Note"`` becomes ``"Note 2"``, ``"Note 3"``, ... when taken. With
        ``start_editing`` the new node is put into name editing and focus
        is requested for it.
        """
        with self._lock:
            try:
                parent = _resolve_directory(self.root, parent_path)
            except NoteStoreError as e:
                return self._fail("add node", e, parent_path)
            node.name = get_collision_free_name(node.name, parent.children.keys())

        result = self.add_node(parent_path, node)
        if result.ok and start_editing:
            with self._lock:
                set_flag(self.shadows.editing, result.path, True)
                set_flag(self.shadows.focus_pending, result.path, True)
        return result

    def change_node_name(self, path: Path, new_name: str) -> OperationResult:
        """Rename the node at ``path``; shadow flags follow the new name."""
        if not is_valid_name(new_name):
            return self._fail("change node name", self._invalid_name(new_name), path)

        try:
            with self._lock:
                check_rename(self.root, path, new_name)
            if path[-1] == new_name:
                return create_success_result(path)

            old_path, confirmed_name = self._require_provider().change_node_name(path, new_name)

            with self._lock:
                new_path = rename_node(self.root, old_path, confirmed_name, self.shadows)
        except NoteStoreError as e:
            return self._fail("change node name", e, path)

        logger.info(f"Renamed {format_path(old_path)} -> {format_path(new_path)}")
        return create_success_result(new_path)

    def delete_node(self, path: Path) -> OperationResult:
        """Delete the node at ``path`` and every flag below it."""
        try:
            with self._lock:
                check_delete(self.root, path)

            confirmed = self._require_provider().delete_node(path)

            with self._lock:
                delete_node(self.root, confirmed, self.shadows)
        except NoteStoreError as e:
            return self._fail("delete node", e, path)

        logger.info(f"Deleted {format_path(confirmed)}")
        return create_success_result(confirmed)

    def move_node(self, node_path: Path, new_parent_path: Path) -> OperationResult:
        """Move the node at ``node_path`` into ``new_parent_path``."""
        try:
            with self._lock:
                if check_move(self.root, node_path, new_parent_path) is None:
                    return create_success_result(node_path)

            old_path, new_path = self._require_provider().move_node(node_path, new_parent_path)

            with self._lock:
                new_path = move_node(self.root, old_path, new_path[:-1], self.shadows)
        except NoteStoreError as e:
            return self._fail("move node", e, node_path)

        logger.info(f"Moved {format_path(old_path)} -> {format_path(new_path)}")
        return create_success_result(new_path)

    def change_page_content(self, path: Path, content: str) -> OperationResult:
        """Edit the file at ``path`` in memory and mark it unsaved."""
        try:
            with self._lock:
                set_file_content(self.root, path, content, self.shadows)
        except NoteStoreError as e:
            logger.debug(f"Edit ignored at {format_path(path)}: {e}")
            return create_error_result(e, path)
        return create_success_result(path)

    # -------------------------------------------------------------------------
    # SAVE ORCHESTRATION
    # -------------------------------------------------------------------------

    def save_page_content(self, path: Path) -> "Future[OperationResult]":
        """
        Persist the file at ``path`` on the worker pool.

        The unsaved flag is cleared before dispatch. If the provider fails
        the flag is set again and the returned future resolves to an
        error result.

        Returns:
            Future[OperationResult]: Resolves once the save settled.
        """
        try:
            provider = self._require_provider()
            with self._lock:
                content = get_file(self.root, path).content
                remove_tree_node(self.shadows.unsaved, path)
                self._pending_saves += 1
        except NoteStoreError as e:
            done: Future[OperationResult] = Future()
            done.set_result(self._fail("save page", e, path))
            return done

        logger.debug(f"Dispatching save of {format_path(path)}")
        return self._executor.submit(self._persist_content, provider, list(path), content)

    def save_many_pages_content(self, path: Path) -> OperationResult:
        """
        Save every unsaved file at or below ``path`` and wait for all of them.

        One failing save neither prevents nor delays the others; failures
        are reported individually in the returned ``SaveManySummary``.

        Returns:
            OperationResult: Success carrying the summary, or InvalidPath
            when nothing is unsaved at ``path``.
        """
        with self._lock:
            unsaved_node = get_tree_node(self.shadows.unsaved, path)
            if unsaved_node is None or (
                    unsaved_node.payload is not True and not has_tree_node_children(unsaved_node)
            ):
                return self._fail(
                    "save pages",
                    InvalidPathError(f"Nothing to save at {format_path(path)}."),
                    path,
                )
            dirty_paths = list(_iter_unsaved_paths(unsaved_node, list(path)))

        futures = {self.save_page_content(p): p for p in dirty_paths}

        summary = SaveManySummary()
        for future in as_completed(futures):
            try:
                result = future.result()
            except Exception as e:
                logger.error(f"Save of {format_path(futures[future])} crashed: {e}", exc_info=e)
                summary.failed.append((futures[future], f"{type(e).__name__}: {e}"))
                continue

            if result.ok:
                summary.saved.append(futures[future])
            else:
                summary.failed.append((futures[future], result.error))

        if summary.failed:
            logger.warning(
                f"Saved {len(summary.saved)} of {len(dirty_paths)} pages under {format_path(path)}."
            )
        return create_success_result(path, data=summary)

    def save_all(self) -> OperationResult:
        """Save every unsaved file in the document."""
        return self.save_many_pages_content([])

    # -------------------------------------------------------------------------
    # FLAG STATE
    # -------------------------------------------------------------------------

    def is_unsaved(self, path: Path) -> bool:
        return self._get_flag(self.shadows.unsaved, path)

    def has_unsaved_changes(self) -> bool:
        with self._lock:
            return has_tree_node_children(self.shadows.unsaved)

    def is_editing(self, path: Path) -> bool:
        return self._get_flag(self.shadows.editing, path)

    def set_node_editing(self, path: Path, is_editing: bool) -> None:
        self._set_flag(self.shadows.editing, path, is_editing)

    def is_expanded(self, path: Path) -> bool:
        return self._get_flag(self.shadows.expanded, path)

    def set_node_expanded(self, path: Path, is_expanded: bool) -> None:
        self._set_flag(self.shadows.expanded, path, is_expanded)

    def is_focus_pending(self, path: Path) -> bool:
        return self._get_flag(self.shadows.focus_pending, path)

    def request_node_focus(self, path: Path) -> None:
        self._set_flag(self.shadows.focus_pending, path, True)

    def reset_node_focus(self, path: Path) -> None:
        self._set_flag(self.shadows.focus_pending, path, False)

    def is_highlighted(self, path: Path) -> bool:
        return self._get_flag(self.shadows.highlighted, path)

    def highlight_node(self, path: Path, is_highlighted: bool) -> None:
        self._set_flag(self.shadows.highlighted, path, is_highlighted)

    def flash_node(self, path: Path, timeout: Optional[float] = None) -> threading.Timer:
        """
        Highlight the node at ``path`` and clear the highlight after ``timeout``.

        Returns:
            threading.Timer: The started timer that clears the highlight.
        """
        self.highlight_node(path, True)
        delay = self._flash_timeout if timeout is None else timeout
        timer = threading.Timer(delay, self.highlight_node, args=(list(path), False))
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        return timer

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _persist_content(
            self,
            provider: StorageProvider,
            path: Path,
            content: str
    ) -> OperationResult:
        """Worker body: write one page and re-arm its flag on failure."""
        try:
            provider.set_page_content(path, content)
        except NoteStoreError as e:
            self._set_flag(self.shadows.unsaved, path, True)
            return self._fail("save page", e, path)
        except Exception:
            self._set_flag(self.shadows.unsaved, path, True)
            raise
        finally:
            with self._lock:
                self._pending_saves -= 1

        logger.debug(f"Saved {format_path(path)}")
        return create_success_result(path)

    def _require_provider(self) -> StorageProvider:
        if self._provider is None:
            raise NoteStoreError("No storage provider installed.")
        return self._provider

    def _reset_state(self) -> None:
        self.root = create_root()
        self.shadows.reset()
        self.is_fetching = False
        self.fetch_error = None

    def _get_flag(self, tree: FlagTree, path: Path) -> bool:
        with self._lock:
            return is_flag_set(tree, path)

    def _set_flag(self, tree: FlagTree, path: Path, value: bool) -> None:
        with self._lock:
            set_flag(tree, path, value)

    @staticmethod
    def _invalid_name(name: str) -> InvalidNameError:
        return InvalidNameError(
            f"'{name}' is empty or contains one of: {' '.join(const.FORBIDDEN_NAME_CHARS)}"
        )

    @staticmethod
    def _fail(action: str, error: NoteStoreError, path: Path) -> OperationResult:
        logger.warning(f"Failed to {action} at {format_path(path)}: {error}")
        return create_error_result(error, path)


# -----------------------------------------------------------------------------
# MODULE HELPERS
# -----------------------------------------------------------------------------

def _resolve_directory(root: DirectoryNode, path: Path) -> DirectoryNode:
    """Resolve ``path`` to an existing directory."""
    node = resolve_path(path, root)
    if node is None:
        raise NotFoundError(f"No node at {format_path(path)}.")
    if not isinstance(node, DirectoryNode):
        raise InvalidPathError(f"{format_path(path)} is a file.")
    return node


def _iter_unsaved_paths(node: FlagTree, path: Path) -> Iterator[Path]:
    """Yield the path of every unsaved file at or below ``node``."""
    if node.payload is True:
        yield path
        return
    for name, child in node.children.items():
        yield from _iter_unsaved_paths(child, [*path, name])
