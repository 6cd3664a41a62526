"""Builders for generated files, source maps and fake consumers."""

import base64
import json
from dataclasses import dataclass
from pathlib import Path

from sourcemap_callsites.consumer import Position

# gen 1:0 -> 1:0, gen 1:10 -> 1:10, gen 2:0 -> 2:12 in ../src/app.ts
SOURCE_MAP = {
    "version": 3,
    "file": "app.js",
    "sources": ["../src/app.ts"],
    "names": [],
    "mappings": "AAAA,UAAU;AACE",
}

GENERATED_BODY = 'function crash(msg) { throw new Error(msg) }\ncrash("FOO")\n'


def inline_comment(source_map: dict[str, object]) -> str:
    """Build a sourceMappingURL comment embedding the map as a data URI."""
    payload = base64.b64encode(json.dumps(source_map).encode("utf-8")).decode("ascii")
    return f"//# sourceMappingURL=data:application/json;charset=utf-8;base64,{payload}"


@dataclass
class GeneratedTree:
    """A ``dist`` directory of generated files next to a ``src`` directory."""

    root: Path

    @property
    def dist(self) -> Path:
        return self.root / "dist"

    @property
    def original(self) -> str:
        return str(self.root / "src" / "app.ts")

    def path(self, name: str) -> str:
        return str(self.dist / name)

    def write(self, name: str, text: str) -> str:
        path = self.dist / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    def generated(self, name: str, comment: str) -> str:
        return self.write(name, GENERATED_BODY + comment + "\n")


class FakeConsumer:
    """Consumer returning a fixed position and recording lookups."""

    def __init__(self, position: Position) -> None:
        self.position = position
        self.calls: list[tuple[int, int]] = []

    def original_position_for(self, line: int, column: int) -> Position:
        self.calls.append((line, column))
        return self.position
