"""Poll a text file and evaluate its expressions whenever it changes."""
from pathlib import Path
import time
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, FilePath, PrivateAttr

from inline_calc.common.logger import logger
from inline_calc.common.models import PatchResult, Selection
from inline_calc.engine.engine import InlineCalcEngine
from inline_calc.host.document import TextDocument


# (modification time in ns, size in bytes)
Fingerprint = Tuple[int, int]


class WatcherConfig(BaseModel):
    """Settings of a FileWatcher."""

    model_config = ConfigDict(frozen=True)

    path: FilePath = Field(..., description="Plain text file to watch")
    interval: float = Field(default=0.5, gt=0, description="Seconds between two polls")
    start: Optional[int] = Field(default=None, description="Caret start handed to the engine")
    end: Optional[int] = Field(default=None, description="Caret end handed to the engine")


class FileWatcher(BaseModel):
    """
    Detect content changes of a file and run the engine once per change.

    Lifecycle:
        - The first poll treats the current content as a change
        - Each later poll compares the file's modification time and size with the last seen ones
        - Content written back by the watcher itself is remembered and does not trigger a new run
    """

    settings: WatcherConfig = Field(..., description="Watcher settings")
    engine: InlineCalcEngine = Field(default_factory=InlineCalcEngine, description="Engine used on every change")

    _last_seen: Optional[Fingerprint] = PrivateAttr(default=None)

    @staticmethod
    def _fingerprint(path: Path) -> Fingerprint:
        stat = path.stat()
        return stat.st_mtime_ns, stat.st_size

    def poll_once(self) -> Optional[PatchResult]:
        """
        Check the file once and process it if it changed.

        :return: Engine result when the file changed since the last poll, else None
        :rtype: Optional[PatchResult]
        """
        path: Path = self.settings.path
        fingerprint: Fingerprint = self._fingerprint(path)
        if fingerprint == self._last_seen:
            return None

        logger.debug(f"👀 Change detected in {path}")
        document = TextDocument.load(path, self.settings.start, self.settings.end)
        result: PatchResult = document.process(self.engine)
        if result.changed:
            caret: Selection = document.write_back(result)
            logger.info(f"👀 Caret in {path} moved to ({caret.start}, {caret.end})")
            fingerprint = self._fingerprint(path)

        self._last_seen = fingerprint
        return result

    def run(self, max_events: Optional[int] = None) -> int:
        """
        Poll the file until interrupted or until ``max_events`` changes were handled.

        :param int max_events: Stop after this many processed changes, None for no limit

        :return: Number of processed changes
        :rtype: int
        """
        logger.info(f"👀 Watching {self.settings.path} every {self.settings.interval}s")
        events: int = 0
        try:
            while max_events is None or events < max_events:
                if self.poll_once() is not None:
                    events += 1
                    continue
                time.sleep(self.settings.interval)
        except KeyboardInterrupt:
            logger.info("👀 Watcher stopped")
        return events
