"""A JSON file holding one document, rewritten whole on every save.

Read-modify-write cycles go through ``update()``, which holds an exclusive
lock file next to the document so concurrent threads and processes never
interleave their writes.
"""

from __future__ import annotations

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from filelock import FileLock


class JsonDocument:

    def __init__(
        self,
        file_path: Path,
        default: Callable[[], Any] = list,
        lock_timeout: float = 10.0,
    ) -> None:
        self._file_path = file_path
        self._default = default
        self._lock = FileLock(str(file_path) + ".lock", timeout=lock_timeout, thread_local=True)
        self._ensure_file()

    def load(self) -> Any:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, document: Any) -> None:
        # Readers only ever see a complete file.
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, self._file_path)

    @contextmanager
    def update(self) -> Iterator[Any]:
        """Yield the current document under the lock; persist it on a clean exit.

        Callers mutate the yielded object in place.  An exception inside the
        block leaves the file untouched.
        """
        with self._lock:
            document = self.load()
            yield document
            self.persist(document)

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if not self._file_path.exists():
                self._file_path.write_text(json.dumps(self._default()), encoding="utf-8")
