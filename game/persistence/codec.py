"""
Save/restore of ledger, buildings, and tide.

Persisted shape (JSON):

    {
      "resources": {"timber": 42.5},
      "buildings": [{"id": "b1", "pos": [3, 4.0, -2], "type": "hut", "level": 2}],
      "tideIndex": 1,
      "timestamp": 1718000000000
    }

There is no version field. Missing fields fall back to defaults (50 timber, no buildings,
tide index 0). The middle `pos` coordinate is a presentation height and is ignored on load.
The accrual rate is never persisted; it is recomputed after every restore.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from config import SAVE_PLACEHOLDER_Y, STARTING_TIMBER, TIDE_STATES
from game.entities.building import Building, BuildingType, snap_to_grid
from game.errors import CorruptSave
from game.sim.timebase import wall_clock_ms

if TYPE_CHECKING:
    from game.session import SimContext
    from game.systems.buildings import BuildingRegistry
    from game.systems.economy import ResourceLedger
    from game.systems.tide import TideCycle

logger = logging.getLogger(__name__)


@dataclass
class SaveBlob:
    timber: float = float(STARTING_TIMBER)
    buildings: List[Building] = field(default_factory=list)
    tide_index: int = 0
    timestamp: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "resources": {"timber": self.timber},
            "buildings": [
                {
                    "id": b.id,
                    "pos": [b.x, SAVE_PLACEHOLDER_Y, b.z],
                    "type": b.type.value,
                    "level": b.level,
                }
                for b in self.buildings
            ],
            "tideIndex": self.tide_index,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: Any) -> "SaveBlob":
        if not isinstance(d, Mapping):
            raise CorruptSave(f"expected an object, got {type(d).__name__}")

        resources = d.get("resources") or {}
        if not isinstance(resources, Mapping):
            raise CorruptSave("'resources' is not an object")
        timber = _number(resources.get("timber", STARTING_TIMBER), "resources.timber")
        if timber < 0:
            raise CorruptSave("negative timber")

        raw_buildings = d.get("buildings") or []
        if not isinstance(raw_buildings, list):
            raise CorruptSave("'buildings' is not a list")
        buildings = [_building_from_dict(bd, i) for i, bd in enumerate(raw_buildings)]
        ids = [b.id for b in buildings]
        if len(set(ids)) != len(ids):
            raise CorruptSave("duplicate building ids")

        tide_index = d.get("tideIndex") or 0
        if isinstance(tide_index, bool) or not isinstance(tide_index, int):
            raise CorruptSave(f"tideIndex must be an integer, got {tide_index!r}")
        if not 0 <= tide_index < len(TIDE_STATES):
            raise CorruptSave(f"tideIndex out of range: {tide_index}")

        # Informational only; anything unusable is dropped.
        timestamp = d.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            timestamp = None
        elif isinstance(timestamp, float) and not math.isfinite(timestamp):
            timestamp = None
        return cls(
            timber=timber,
            buildings=buildings,
            tide_index=tide_index,
            timestamp=None if timestamp is None else int(timestamp),
        )


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptSave(f"{where} must be a finite number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise CorruptSave(f"{where} is out of range") from None
    if not math.isfinite(number):
        raise CorruptSave(f"{where} must be a finite number, got {value!r}")
    return number


def _reject_constant(name: str):
    raise CorruptSave(f"non-standard JSON constant {name}")


def _building_from_dict(bd: Any, index: int) -> Building:
    where = f"buildings[{index}]"
    if not isinstance(bd, Mapping):
        raise CorruptSave(f"{where} is not an object")
    if bd.get("id") is None:
        raise CorruptSave(f"{where} has no id")

    pos = bd.get("pos")
    if not isinstance(pos, list) or len(pos) not in (2, 3):
        raise CorruptSave(f"{where}.pos must hold 2 or 3 coordinates")
    x = _number(pos[0], f"{where}.pos")
    z = _number(pos[-1], f"{where}.pos")

    try:
        btype = BuildingType.parse(bd.get("type"))
    except ValueError as e:
        raise CorruptSave(f"{where}: {e}") from e

    # Levels are taken as saved, without range checks.
    level = _number(bd.get("level", 1), f"{where}.level")

    return Building(
        id=str(bd["id"]),
        type=btype,
        level=int(level),
        position=snap_to_grid(x, z),
    )


class PersistenceCodec:
    def encode(self, ledger: "ResourceLedger", registry: "BuildingRegistry", tide: "TideCycle") -> SaveBlob:
        return SaveBlob(
            timber=ledger.current(),
            buildings=[
                Building(id=b.id, type=b.type, level=b.level, position=b.position)
                for b in registry.buildings
            ],
            tide_index=tide.index,
            timestamp=wall_clock_ms(),
        )

    def decode(self, payload: Any) -> SaveBlob:
        """Validate a parsed payload (or JSON text). Raises CorruptSave; never touches live state."""
        if isinstance(payload, (str, bytes)):
            return self.loads(payload)
        return SaveBlob.from_dict(payload)

    def dumps(self, blob: SaveBlob) -> str:
        return json.dumps(blob.to_dict(), sort_keys=True)

    def loads(self, text) -> SaveBlob:
        try:
            raw = json.loads(text, parse_constant=_reject_constant)
        except (TypeError, ValueError) as e:
            raise CorruptSave(f"not valid JSON ({e})") from e
        return SaveBlob.from_dict(raw)

    def apply(self, blob: SaveBlob, ctx: "SimContext") -> None:
        """Replace live state wholesale with `blob`, then refresh the derived rate once."""
        ctx.ledger.reset(blob.timber)
        ctx.registry.replace_all(
            Building(id=b.id, type=b.type, level=b.level, position=b.position) for b in blob.buildings
        )
        ctx.tide.restore(blob.tide_index)
        ctx.rates.recalculate()
        ctx.display.on_tide_changed(ctx.tide.label)
        logger.info(
            "restored %d buildings, %.1f timber, tide %s",
            len(ctx.registry), ctx.ledger.current(), ctx.tide.label,
        )
