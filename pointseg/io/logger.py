"""Session logger.

Writes a simple text log per image to:
  <log_dir>/<image_stem>/<image_stem>_session.txt

Each line starts with the **session time** (HH:MM:SS.mmm since the image was loaded)
so runs and exports can be matched up with the files they produced.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pointseg.utils.time import ms_to_hhmmssmmm
from pointseg.utils.paths import safe_image_stem


class SessionLogger:
    def __init__(self, image_path: Optional[str], base_dir: str):
        self.image_path = image_path
        self.image_stem = safe_image_stem(image_path)

        self.base_dir = Path(base_dir)
        self.out_dir = self.base_dir / self.image_stem
        self.out_dir.mkdir(parents=True, exist_ok=True)

        self.out_path = self.out_dir / f"{self.image_stem}_session.txt"
        self._fh = self.out_path.open("a", encoding="utf-8")

    def _write(self, elapsed_ms: int, text: str) -> None:
        t_str = ms_to_hhmmssmmm(int(elapsed_ms))
        self._fh.write(f"{t_str}  {text}\n")
        self._fh.flush()

    def log_run(self, elapsed_ms: int, fg: int, bg: int, occupied: int) -> None:
        self._write(elapsed_ms, f"run (fg={int(fg)}, bg={int(bg)}, occupied={int(occupied)})")

    def log_failure(self, elapsed_ms: int, reason: str) -> None:
        self._write(elapsed_ms, f"failed ({reason})")

    def log_export(self, elapsed_ms: int, kind: str, path: str) -> None:
        self._write(elapsed_ms, f"export {kind} -> {path}")

    def close(self) -> None:
        try:
            self._fh.flush()
        finally:
            self._fh.close()

    def __enter__(self) -> "SessionLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
