"""Navigation paths and the in-process router that drives hex selection."""

import logging
from collections import deque
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

ROOT_PATH = "/"
HEX_SEGMENT = "hex"

PathListener = Callable[[str], None]
PathGuard = Callable[[str], bool]


class NavigationRejected(RuntimeError):
    """Raised when the host application refuses a navigation push."""


def normalize_path(path: str) -> str:
    """
    Normalize a location path.

    Drops query string and fragment, collapses repeated slashes and
    trailing slashes. "" and "/" both become "/".

    Example:
        >>> normalize_path("hex//882830829bfffff/?tab=info")
        "/hex/882830829bfffff"
    """
    path = path.split("#", 1)[0].split("?", 1)[0]
    segments = [segment for segment in path.split("/") if segment]
    return "/" + "/".join(segments)


def path_segments(path: str) -> list[str]:
    """Split a path into its non-empty segments ("/" -> [])."""
    return [segment for segment in normalize_path(path).split("/") if segment]


def hex_path(hex_id: str) -> str:
    """Build the detail path for a hex."""
    return f"/{HEX_SEGMENT}/{hex_id}"


def hex_id_from_segments(segments: list[str]) -> str | None:
    """
    Extract the hex id from a hex detail path.

    Returns:
        The hex id for ["hex", <id>], None for any other shape
    """
    if len(segments) == 2 and segments[0] == HEX_SEGMENT and segments[1]:
        return segments[1]
    return None


def is_root(segments: list[str]) -> bool:
    return not segments


class Router:
    """
    Location provider for the map view.

    Listeners are notified of every pushed path, in push order. Delivery
    never nests: a push made while listeners are running, or inside a
    deferred() block, is queued and delivered once the current handler
    has returned.
    """

    def __init__(self, initial_path: str = ROOT_PATH, guard: PathGuard | None = None) -> None:
        """
        Initialize the router.

        Args:
            initial_path: Path the application starts on
            guard: Optional host callback; returning False rejects a push
        """
        self._path = normalize_path(initial_path)
        self._guard = guard
        self._listeners: list[PathListener] = []
        self._pending: deque[str] = deque()
        self._hold_depth = 0
        self._dispatching = False
        self.history: list[str] = [self._path]

    @property
    def path(self) -> str:
        return self._path

    @property
    def segments(self) -> list[str]:
        return path_segments(self._path)

    def subscribe(self, listener: PathListener) -> Callable[[], None]:
        """
        Register a path-change listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def push(self, path: str) -> None:
        """
        Navigate to a new path.

        Raises:
            NavigationRejected: If the guard refuses the path
        """
        path = normalize_path(path)
        if self._guard is not None and not self._guard(path):
            logger.warning(f"Navigation to {path} rejected")
            raise NavigationRejected(f"Navigation to {path} rejected")

        logger.info(f"Navigating {self._path} -> {path}")
        self._path = path
        self.history.append(path)
        self._pending.append(path)
        self._drain()

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Hold path notifications until the block exits."""
        self._hold_depth += 1
        try:
            yield
        finally:
            self._hold_depth -= 1
            self._drain()

    def _drain(self) -> None:
        if self._hold_depth or self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                path = self._pending.popleft()
                for listener in list(self._listeners):
                    listener(path)
        except Exception:
            # Queued paths are stale once a listener failed; the next push reconciles
            self._pending.clear()
            raise
        finally:
            self._dispatching = False
