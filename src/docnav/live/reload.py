"""WebSocket-based live rebuild for development mode.

Monitors documents and configuration for changes, rebuilds the site and
notifies connected clients via WebSocket with the outcome.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import awatch

from docnav.errors import BuildReport
from docnav.site import SiteLoader

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live rebuild.

    Any change to a watched document or config file triggers a full site
    rebuild. Deletions count too, since removing a document can leave
    sidebar references unresolved.
    """

    def __init__(
        self,
        source_dir: Path,
        site_loader: SiteLoader,
        watch_patterns: list[str] | None = None,
        *,
        watch_files: list[Path] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            source_dir: Documents directory to watch
            site_loader: Loader to rebuild on changes
            watch_patterns: Glob patterns to watch (default: ["**/*.md", "**/*.mdx"])
            watch_files: Config and sidebar files to watch
        """
        self._source_dir = source_dir.resolve()
        self._site_loader = site_loader
        self._watch_patterns = watch_patterns or ["**/*.md", "**/*.mdx"]
        self._watch_files = [path.resolve() for path in watch_files or []]
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files_loop())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload.

        Args:
            request: aiohttp request

        Returns:
            WebSocket response
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files_loop(self) -> None:
        """Watch for file changes and rebuild once per batch."""
        paths = [p for p in (self._source_dir, *self._watch_files) if p.exists()]
        if not paths:
            logger.warning("Nothing to watch for live reload")
            return

        async for changes in awatch(*paths):
            if any(self.is_relevant(Path(path_str)) for _, path_str in changes):
                await self.rebuild()

    async def rebuild(self) -> BuildReport | None:
        """Rebuild the site and broadcast the outcome.

        Returns:
            Build report, or None if configuration could not be loaded
        """
        try:
            report = await asyncio.to_thread(self._site_loader.reload)
        except (OSError, ValueError) as e:
            logger.error(f"Site rebuild failed: {e}")
            await self._broadcast({"type": "error", "message": str(e)})
            return None

        for error in report.errors:
            logger.error(str(error))
        await self._broadcast(
            {
                "type": "reload",
                "ok": report.ok,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
            },
        )
        return report

    def is_relevant(self, path: Path) -> bool:
        """Check if a changed path should trigger a rebuild.

        Args:
            path: Changed path

        Returns:
            True for watched config files and documents matching a pattern
        """
        if path.resolve() in self._watch_files:
            return True

        try:
            relative = path.resolve().relative_to(self._source_dir)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            # Path.match anchors from the right, so "**/*.md" also covers top-level files
            if relative.match(pattern) or relative.match(pattern.removeprefix("**/")):
                return True
        return False

    async def _broadcast(self, event: dict[str, object]) -> None:
        """Send an event to all connected clients."""
        if not self._connections:
            return

        message = json.dumps(event)

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        manager: LiveReloadManager instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
