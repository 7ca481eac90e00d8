# MIT License
"""Persisted node position overrides.

A :class:`PositionStore` maps node ids to normalised canvas coordinates.
Overrides are kept in memory and mirrored to a durable key-value backend
under a single namespace key, serialised as one flat JSON object::

    {"stage1": {"x": 0.42, "y": 0.5}, ...}

Storage is best-effort.  A missing, unreadable or corrupted entry is
treated as "no overrides"; a failed write is logged and otherwise
ignored, so the in-memory position always reflects the latest move.
"""
from __future__ import annotations
import json
import logging
import math
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from .catalog import DIAGRAM, Node, NormalizedPoint

logger = logging.getLogger(__name__)

FALLBACK_POSITION = NormalizedPoint(x=0.5, y=0.5)

POSITIONS_DIR_ENV = "COMPOST_POSITIONS_DIR"
DEFAULT_POSITIONS_DIR = "~/.compost_coordinator"


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal durable string store addressed by key."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Process-local backend, mainly for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore:
    """Backend writing each key to ``<directory>/<key>.json``."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)


def _coerce_point(value: object) -> Optional[NormalizedPoint]:
    if not isinstance(value, dict):
        return None
    x, y = value.get("x"), value.get("y")
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    try:
        x, y = float(x), float(y)
    except OverflowError:
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return NormalizedPoint(x=x, y=y)


def parse_positions(raw: Union[str, bytes, None]) -> Optional[Dict[str, NormalizedPoint]]:
    """Decode a serialised override map.

    This function never raises.  It returns ``None`` when ``raw`` is
    empty, is not valid JSON or is not a JSON object.  Individual
    entries that are not ``{"x": number, "y": number}`` are dropped with
    a warning; the remaining entries are kept.
    """
    if raw is None or raw == "" or raw == b"":
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Failed to parse saved positions: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("Saved positions are not an object (got %s)", type(data).__name__)
        return None
    positions: Dict[str, NormalizedPoint] = {}
    for node_id, value in data.items():
        point = _coerce_point(value)
        if point is None:
            logger.warning("Ignoring malformed saved position for %r: %r", node_id, value)
            continue
        positions[str(node_id)] = point
    return positions


def serialize_positions(positions: Mapping[str, NormalizedPoint]) -> str:
    return json.dumps({k: {"x": p.x, "y": p.y} for k, p in positions.items()})


class PositionStore:
    """Resolve and persist normalised node positions.

    Parameters
    ----------
    nodes:
        Node catalog providing default positions.
    backend:
        Durable key-value store.  ``None`` keeps overrides in memory only.
    namespace:
        Key under which the whole override map is stored.
    """

    def __init__(
        self,
        nodes: Mapping[str, Node],
        backend: Optional[KeyValueStore] = None,
        namespace: str = DIAGRAM.storage_namespace,
    ):
        self.nodes = nodes
        self.backend = backend
        self.namespace = namespace
        self._overrides: Dict[str, NormalizedPoint] = self._load()

    def _load(self) -> Dict[str, NormalizedPoint]:
        if self.backend is None:
            return {}
        try:
            raw = self.backend.get_item(self.namespace)
        except Exception as e:
            logger.warning("Failed to load saved positions: %s", e)
            return {}
        return parse_positions(raw) or {}

    def reload(self) -> None:
        """Re-read overrides from the backend, discarding unsaved state."""
        self._overrides = self._load()

    def resolve_position(self, node_id: str) -> NormalizedPoint:
        """Override if present, else the node default, else the canvas centre."""
        saved = self._overrides.get(node_id)
        if saved is not None:
            return saved
        node = self.nodes.get(node_id)
        if node is not None:
            return node.position
        return FALLBACK_POSITION

    def set_position(self, node_id: str, x: float, y: float) -> NormalizedPoint:
        """Record an override and write the whole map back to the backend.

        Coordinates are stored as given; clamping is the caller's job.
        The in-memory override is updated even if the write fails.
        """
        point = NormalizedPoint(x=float(x), y=float(y))
        self._overrides[node_id] = point
        if self.backend is not None:
            merged = dict(self._load())
            merged.update(self._overrides)
            try:
                self.backend.set_item(self.namespace, serialize_positions(merged))
            except Exception as e:
                logger.warning("Failed to save position for %r: %s", node_id, e)
        return point

    def export_positions(self) -> Dict[str, Dict[str, float]]:
        """Snapshot of the current overrides as plain dictionaries."""
        return {k: {"x": p.x, "y": p.y} for k, p in self._overrides.items()}


def positions_directory(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Directory of the saved position file, overridable via ``COMPOST_POSITIONS_DIR``."""
    env = os.environ if environ is None else environ
    return Path(env.get(POSITIONS_DIR_ENV) or DEFAULT_POSITIONS_DIR).expanduser()
