"""
Save slots: where encoded saves live between sessions.

The codec turns live state into text; stores only move that text in and out of a named slot.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Protocol

_SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


class SaveStore(Protocol):
    def read(self, slot: str) -> Optional[str]:
        ...

    def write(self, slot: str, text: str) -> None:
        ...


@dataclass
class MemoryStore:
    """In-process slots (headless runs, tests)."""

    slots: Dict[str, str] = field(default_factory=dict)

    def read(self, slot: str) -> Optional[str]:
        return self.slots.get(slot)

    def write(self, slot: str, text: str) -> None:
        self.slots[slot] = text


class JsonFileStore:
    """
    File-backed slots.

    - <root>/<slot>.json: one encoded save per slot, replaced atomically on write
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, slot: str) -> Path:
        if not _SLOT_PATTERN.match(slot):
            raise ValueError(f"invalid save slot name: {slot!r}")
        return self.root / f"{slot}.json"

    def read(self, slot: str) -> Optional[str]:
        p = self.path_for(slot)
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    def write(self, slot: str, text: str) -> None:
        _atomic_write_text(self.path_for(slot), text)
