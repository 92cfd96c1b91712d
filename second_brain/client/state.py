"""
Client Graph State.

In-memory mirror of the note graph held by the interactive view. Gestures
call the Graph API and every resulting change goes through `apply()`, the
single reconciler for the mirror:

    gesture → GraphApiClient call → response → message → apply()

Adds and connects are shown only after the server confirms them. Edits and
deletes leave the mirror untouched on failure. Drag-release is the one
exception: the local position stays where the user put it even if saving
fails, and an "unsaved" notification is raised instead.

Responses may arrive out of order. Each note update carries a sequence
number; a response older than one already applied is dropped, and any
response for a note or edge endpoint no longer in the mirror is a no-op.
"""

import asyncio
import itertools
from typing import Any

from second_brain.backend.core.logging import get_logger, log_with_source
from second_brain.client.api import ApiRequestError, GraphApiClient
from second_brain.client.models import (
    EdgeConfirmed,
    EdgesRemoved,
    FallbackLayout,
    GraphMessage,
    NoteConfirmed,
    NoteRemoved,
    Notification,
    NotificationKind,
    PositionMoved,
    ViewEdge,
    ViewNode,
)

logger = get_logger(__name__)

DEFAULT_EDGE_STYLE: dict[str, Any] = {
    "stroke": "hsl(var(--tree-connection))",
    "strokeWidth": 2,
}


class GraphState:
    """
    Renderable mirror of the graph, kept converged with the server.

    Usage:
        state = GraphState(GraphApiClient.from_config())
        await state.load()
        node = await state.add_note({"name": "A", "content": "a"})
        await state.drag_release(node.id, 120, 80)
    """

    def __init__(
        self,
        api: GraphApiClient,
        default_edge_style: dict[str, Any] | None = None,
        layout: FallbackLayout | None = None,
    ) -> None:
        self.api = api
        self.default_edge_style = dict(default_edge_style or DEFAULT_EDGE_STYLE)
        self.layout = layout or FallbackLayout()
        self.nodes: dict[str, ViewNode] = {}
        self.edges: dict[str, ViewEdge] = {}
        self.notifications: list[Notification] = []
        self._counter = itertools.count(1)
        self._issued: dict[str, int] = {}
        self._applied: dict[str, int] = {}

    @classmethod
    def from_config(cls, api: GraphApiClient) -> "GraphState":
        """Build a state with defaults from client.yaml."""
        from second_brain.backend.core.config import get_app_config

        client_config = get_app_config().client
        return cls(
            api,
            default_edge_style={
                "stroke": client_config.default_edge_style.stroke,
                "strokeWidth": client_config.default_edge_style.stroke_width,
            },
            layout=FallbackLayout(
                x=client_config.fallback_layout.x,
                y=client_config.fallback_layout.y,
                step=client_config.fallback_layout.step,
            ),
        )

    # =========================================================================
    # Reconciler
    # =========================================================================

    def apply(self, message: GraphMessage) -> bool:
        """
        Apply one reconciliation message to the mirror.

        Returns:
            True if the mirror changed, False if the message was stale
        """
        if isinstance(message, NoteConfirmed):
            return self._confirm_note(message)
        if isinstance(message, PositionMoved):
            node = self.nodes.get(message.note_id)
            if node is None:
                return False
            node.x, node.y = message.x, message.y
            return True
        if isinstance(message, NoteRemoved):
            return self._remove_note(message.note_id)
        if isinstance(message, EdgeConfirmed):
            edge = message.edge
            if edge.source not in self.nodes or edge.target not in self.nodes:
                self._log_stale("edge", edge.id)
                return False
            self.edges[edge.id] = edge
            return True
        if isinstance(message, EdgesRemoved):
            removed = [self.edges.pop(edge_id, None) for edge_id in message.edge_ids]
            return any(edge is not None for edge in removed)
        raise TypeError(f"Unknown graph message: {type(message).__name__}")

    def _confirm_note(self, message: NoteConfirmed) -> bool:
        node = message.node
        if message.seq is None:
            self.nodes[node.id] = node
            return True

        current = self.nodes.get(node.id)
        if current is None or message.seq <= self._applied.get(node.id, 0):
            self._log_stale("note", node.id, seq=message.seq)
            return False

        self._applied[node.id] = message.seq
        if message.seq < self._issued.get(node.id, 0):
            # A newer request is still in flight; keep the user's placement.
            node.x, node.y = current.x, current.y
        self.nodes[node.id] = node
        return True

    def _remove_note(self, note_id: str) -> bool:
        if self.nodes.pop(note_id, None) is None:
            return False
        for edge_id in [e.id for e in self.edges.values() if e.touches(note_id)]:
            del self.edges[edge_id]
        self._issued.pop(note_id, None)
        self._applied.pop(note_id, None)
        return True

    def _log_stale(self, entity: str, entity_id: str, **kwargs: Any) -> None:
        log_with_source(
            logger, "client", "debug",
            "Stale response dropped", entity=entity, entity_id=entity_id, **kwargs,
        )

    # =========================================================================
    # Gestures
    # =========================================================================

    async def load(self) -> bool:
        """Replace the mirror with the server's notes and edges."""
        try:
            notes, edges = await asyncio.gather(self.api.list_notes(), self.api.list_edges())
        except ApiRequestError as e:
            self._notify(
                NotificationKind.ERROR,
                "Load failed",
                f"Could not load notes and connections: {e.message}",
            )
            return False

        self.nodes = {}
        for index, data in enumerate(notes):
            node = ViewNode.from_wire(data, index, self.layout)
            self.nodes[node.id] = node

        self.edges = {}
        for data in edges:
            edge = ViewEdge.from_wire(data)
            if edge.source in self.nodes and edge.target in self.nodes:
                self.edges[edge.id] = edge

        self._issued.clear()
        self._applied.clear()
        log_with_source(
            logger, "client", "info",
            "Graph loaded", notes=len(self.nodes), edges=len(self.edges),
        )
        return True

    async def add_note(self, fields: dict[str, Any]) -> ViewNode | None:
        """Create a note; it appears only once the server returns it."""
        payload = dict(fields)
        if "position" not in payload:
            x, y = self.layout.position(len(self.nodes))
            payload["position"] = {"x": x, "y": y}

        try:
            data = await self.api.create_note(payload)
        except ApiRequestError as e:
            self._notify(NotificationKind.ERROR, "Add failed", f"Could not add the note: {e.message}")
            return None

        node = ViewNode.from_wire(data, len(self.nodes), self.layout)
        self.apply(NoteConfirmed(node))
        self._notify(NotificationKind.SUCCESS, "Note added", f'Note "{node.name}" was added successfully.')
        return node

    async def edit_note(self, note_id: str, fields: dict[str, Any]) -> ViewNode | None:
        """Update a note; on failure the mirror keeps its previous values."""
        seq = self._issue(note_id)
        try:
            data = await self.api.update_note(note_id, fields)
        except ApiRequestError as e:
            self._notify(NotificationKind.ERROR, "Update failed", f"Could not update the note: {e.message}")
            return None

        if not self.apply(NoteConfirmed(ViewNode.from_wire(data, len(self.nodes), self.layout), seq)):
            return None
        node = self.nodes[note_id]
        self._notify(NotificationKind.SUCCESS, "Note updated", f'Note "{node.name}" was updated successfully.')
        return node

    def move_note(self, note_id: str, x: float, y: float) -> bool:
        """Move a node locally while it is being dragged."""
        return self.apply(PositionMoved(note_id, x, y))

    async def drag_release(self, note_id: str, x: float, y: float) -> bool:
        """
        Persist a dragged position.

        The local position is never rolled back. A failed save raises an
        "unsaved" notification and the next load may revert it.
        """
        if not self.apply(PositionMoved(note_id, x, y)):
            return False

        seq = self._issue(note_id)
        try:
            data = await self.api.update_note(note_id, {"position": {"x": x, "y": y}})
        except ApiRequestError as e:
            self._notify(
                NotificationKind.UNSAVED,
                "Position update failed",
                f"Could not save the new position: {e.message}",
            )
            return False

        node = ViewNode.from_wire(data, len(self.nodes), self.layout)
        current = self.nodes.get(note_id)
        if current is not None and (current.x, current.y) != (x, y):
            # Dragged again since release; the live position wins.
            node.x, node.y = current.x, current.y
        self.apply(NoteConfirmed(node, seq))
        return True

    async def delete_note(self, note_id: str) -> bool:
        """Delete a note and mirror the server cascade on its edges."""
        try:
            await self.api.delete_note(note_id)
        except ApiRequestError as e:
            self._notify(NotificationKind.ERROR, "Delete failed", f"Could not delete the note: {e.message}")
            return False

        node = self.nodes.get(note_id)
        self.apply(NoteRemoved(note_id))
        name = node.name if node else note_id
        self._notify(
            NotificationKind.SUCCESS,
            "Note deleted",
            f'Note "{name}" and its connections were deleted successfully.',
        )
        return True

    async def connect(
        self,
        source: str,
        target: str,
        label: str = "",
        animated: bool = False,
    ) -> ViewEdge | None:
        """Connect two notes; the edge appears only once the server accepts it."""
        try:
            data = await self.api.create_edge(
                source,
                target,
                style=self.default_edge_style,
                label=label,
                animated=animated,
            )
        except ApiRequestError as e:
            self._notify(NotificationKind.ERROR, "Connection failed", e.message)
            return None

        edge = ViewEdge.from_wire(data)
        if not self.apply(EdgeConfirmed(edge)):
            return None
        self._notify(NotificationKind.SUCCESS, "Connection created", "Notes have been connected successfully")
        return edge

    async def disconnect(self, edge_ids: list[str]) -> bool:
        """
        Delete edges concurrently.

        The edges leave the mirror whatever the individual outcomes; a
        failure notification is raised if any delete failed.
        An empty selection is a no-op.
        """
        ids = tuple(edge_ids)
        if not ids:
            return False
        results = await asyncio.gather(
            *(self.api.delete_edge(edge_id) for edge_id in ids),
            return_exceptions=True,
        )
        self.apply(EdgesRemoved(ids))

        failures = []
        for edge_id, result in zip(ids, results):
            if isinstance(result, ApiRequestError):
                failures.append(edge_id)
            elif isinstance(result, BaseException):
                raise result

        if failures:
            self._notify(
                NotificationKind.ERROR,
                "Delete failed",
                f"Could not delete {len(failures)} of {len(ids)} connection(s)",
            )
            return False
        self._notify(NotificationKind.SUCCESS, "Connection deleted", "Connection has been removed")
        return True

    async def upload_image(self, filename: str, data: bytes) -> str | None:
        """Upload an image for a note form; returns its URL."""
        try:
            return await self.api.upload(filename, data)
        except ApiRequestError as e:
            self._notify(NotificationKind.ERROR, "Upload failed", f"Could not upload the image: {e.message}")
            return None

    # =========================================================================
    # Notifications
    # =========================================================================

    def drain_notifications(self) -> list[Notification]:
        """Return pending notifications and clear them."""
        pending, self.notifications = self.notifications, []
        return pending

    def _notify(self, kind: NotificationKind, title: str, message: str) -> None:
        self.notifications.append(Notification(kind, title, message))
        level = "info" if kind is NotificationKind.SUCCESS else "warning"
        log_with_source(logger, "client", level, title, notification=kind.value, detail=message)

    def _issue(self, note_id: str) -> int:
        seq = next(self._counter)
        self._issued[note_id] = seq
        return seq
