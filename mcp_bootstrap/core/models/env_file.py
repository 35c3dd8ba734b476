"""
EnvFile — the flat ``KEY=VALUE`` secrets file written for the server.

The file is created once per run and always overwritten wholesale.
It is never merged with, or parsed from, an existing file. Trailing
comment lines document optional keys; nothing ever reads them back.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class EnvFile(BaseModel):
    """Ordered key/value pairs plus a trailing comment block."""

    entries: list[tuple[str, str]] = Field(default_factory=list)
    required: list[str] = Field(default_factory=list)
    comments: list[str] = Field(default_factory=list)

    def set(self, key: str, value: str, required: bool = False) -> None:
        """Set ``key``, keeping its original position if already present."""
        for i, (existing, _) in enumerate(self.entries):
            if existing == key:
                self.entries[i] = (key, value)
                break
        else:
            self.entries.append((key, value))
        if required and key not in self.required:
            self.required.append(key)

    def get(self, key: str) -> str | None:
        for existing, value in self.entries:
            if existing == key:
                return value
        return None

    def missing_required(self) -> list[str]:
        """Required keys that are absent or empty."""
        return [key for key in self.required if not self.get(key)]

    def render(self) -> str:
        """Serialize to file content. Raises ValueError if a required key is empty."""
        missing = self.missing_required()
        if missing:
            raise ValueError(f"Required value(s) empty: {', '.join(missing)}")

        lines = [f"{key}={value}" for key, value in self.entries]
        if self.comments:
            lines.append("")
            lines.extend(
                c if c.startswith("#") or not c else f"# {c}" for c in self.comments
            )
        return "\n".join(lines) + "\n"

    def write(self, path: Path) -> Path:
        """Write (overwrite) the file at ``path``."""
        path.write_text(self.render(), encoding="utf-8")
        return path
