"""
project: undercroft
module: dungeon_api.py
License: MIT

Dungeon generation API routes.

All endpoints are read-only GETs. Query parameters (all optional):
``seed`` (int, or any string hashed to an int), ``width``, ``height``,
``rooms``, ``corridor_width``, ``extra_policy``. Invalid values yield a
400 JSON ``{"error": ...}``.
"""

import hashlib
import os
import threading
from collections import OrderedDict

from flask import Blueprint, Response, current_app, jsonify, request

from undercroft.dungeon import DungeonConfig, Dungeon
from undercroft.dungeon.pipeline import SEED_MAX
from undercroft.dungeon.render import to_ascii
from undercroft.dungeon.spawn import choose_spawn_point
from undercroft.logging_utils import get_logger

log = get_logger("routes.dungeon")

bp_dungeon = Blueprint("dungeon", __name__)

# Query parameter -> DungeonConfig field
QUERY_FIELDS = {
    "width": "width",
    "height": "height",
    "rooms": "room_count",
    "corridor_width": "corridor_width",
    "extra_policy": "extra_policy",
}

# Simple in-process cache (seed, config)->Dungeon. Guarded by a lock since the
# dev server may serve requests from several threads.
_dungeon_cache: "OrderedDict[tuple, Dungeon]" = OrderedDict()
_dungeon_cache_lock = threading.Lock()


def _coerce_seed(raw_seed):
    """Convert a provided seed (int or str) into a positive bounded int.

    Missing/blank seeds return None so the generator draws one itself.
    """
    if raw_seed is None:
        return None
    if isinstance(raw_seed, int):
        return raw_seed % SEED_MAX
    s = str(raw_seed).strip()
    if not s:
        return None
    if s.lstrip("-").isdigit():
        return int(s) % SEED_MAX
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_MAX or 1


def _config_from_request(args) -> DungeonConfig:
    data = {field: args.get(param) for param, field in QUERY_FIELDS.items() if args.get(param)}
    data["seed"] = _coerce_seed(args.get("seed"))
    limit = current_app.config.get("DUNGEON_MAX_SIZE", 256)
    for dim in ("width", "height"):
        if dim in data and str(data[dim]).isdigit() and int(data[dim]) > limit:
            raise ValueError(f"{dim} must be <= {limit}")
    return DungeonConfig.from_mapping(data)


def _cache_key(config: DungeonConfig):
    return tuple(sorted(config.to_dict().items()))


def clear_dungeon_cache():
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def get_cached_dungeon(config: DungeonConfig) -> Dungeon:
    """Return a dungeon for ``config``, reusing a cached instance for seeded configs.

    Unseeded configs are never cached (every call should differ).
    """
    if os.environ.get("UNDERCROFT_DISABLE_CACHE") == "1" or not config.seed:
        return Dungeon(config)
    key = _cache_key(config)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            _dungeon_cache.move_to_end(key)
            return dungeon
    dungeon = Dungeon(config)
    cap = current_app.config.get("DUNGEON_CACHE_MAX", 8)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        while len(_dungeon_cache) > cap:
            _dungeon_cache.popitem(last=False)
    return dungeon


@bp_dungeon.errorhandler(ValueError)
def _bad_request(exc):
    log.warn(event="bad_request", path=request.path, error=str(exc))
    return jsonify({"error": str(exc)}), 400


@bp_dungeon.route("/api/health")
def health():
    return jsonify({"status": "ok"})


@bp_dungeon.route("/api/dungeon")
def dungeon_json():
    """Full dungeon: seed, size, rooms, row-major grid, graph edges, metrics."""
    dungeon = get_cached_dungeon(_config_from_request(request.args))
    return jsonify(dungeon.to_dict())


@bp_dungeon.route("/api/dungeon/ascii")
def dungeon_ascii():
    dungeon = get_cached_dungeon(_config_from_request(request.args))
    body = to_ascii(dungeon.grid) + "\n"
    return Response(body, mimetype="text/plain", headers={"X-Dungeon-Seed": str(dungeon.seed)})


@bp_dungeon.route("/api/dungeon/spawn")
def dungeon_spawn():
    dungeon = get_cached_dungeon(_config_from_request(request.args))
    picked = choose_spawn_point(dungeon.grid, dungeon.rooms)
    if picked is None:
        return jsonify({"seed": dungeon.seed, "spawn": None, "room": None}), 404
    (x, y), room = picked
    return jsonify({"seed": dungeon.seed, "spawn": [x, y], "room": room.id})
