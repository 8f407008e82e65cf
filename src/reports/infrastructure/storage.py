"""
Report Storage
==============

Filesystem access for the report pipeline.

Blocking file operations run in worker threads so report generators
suspend at I/O and interleave on the event loop.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

from src.reports.application.services import IReportStorage
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class FileSystemReportStorage(IReportStorage):
    """Reads staged CSV files from one directory and writes reports to another."""

    def __init__(self, tmp_dir: Path, output_dir: Path):
        self._tmp_dir = Path(tmp_dir)
        self._output_dir = Path(output_dir)

    def ensure_directories(self) -> None:
        for directory in (self._tmp_dir, self._output_dir):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created directory", extra={"path": str(directory)})

        logger.info("Report storage initialized", extra={
            "tmp_dir": str(self._tmp_dir),
            "output_dir": str(self._output_dir),
        })

    async def list_input_files(self, exclude: Optional[str] = None) -> List[str]:
        return await asyncio.to_thread(self._list_input_files, exclude)

    async def read_input(self, name: str) -> str:
        return await asyncio.to_thread((self._tmp_dir / name).read_text, encoding="utf-8")

    async def write_output(self, name: str, content: str) -> None:
        await asyncio.to_thread((self._output_dir / name).write_text, content, encoding="utf-8")

    def _list_input_files(self, exclude: Optional[str]) -> List[str]:
        return sorted(
            path.name
            for path in self._tmp_dir.iterdir()
            if path.is_file() and path.name.endswith(".csv") and path.name != exclude
        )
