"""
File-backed storage for credentials and token caches.

`TokenStore` is parametrised over a Pydantic model type and serialises one
instance per JSON file. A missing file is a normal state (`load` returns
None); an unreadable or malformed file is an error. File I/O runs in a
worker thread so two stores can be driven concurrently from the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import InvalidFormat, StoreNotReadable

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class TokenStore(Generic[T]):
    def __init__(self, path: Path | str, model: Type[T], *, mode: Optional[int] = None) -> None:
        self.path = Path(path).expanduser()
        self.model = model
        # Permission bits set on the file before any content is written
        self.mode = mode

    def __repr__(self) -> str:
        return f"TokenStore({self.model.__name__}, {str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def _read(self) -> Optional[T]:
        if not self.exists():
            return None
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreNotReadable(self.path, str(e)) from e
        try:
            return self.model.model_validate_json(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidFormat(self.path, f"not UTF-8 text ({e.reason})") from e
        except ValidationError as e:
            raise InvalidFormat(self.path, f"expected {self.model.__name__}") from e

    def _write(self, value: T) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = value.model_dump_json().encode("utf-8")
        if self.mode is None:
            self.path.write_bytes(data)
            return
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.mode)
        with os.fdopen(fd, "wb") as f:
            # os.open only applies the mode when it creates the file
            os.chmod(self.path, self.mode)
            f.write(data)

    async def load(self) -> Optional[T]:
        value = await asyncio.to_thread(self._read)
        logger.debug("Loaded %s: %s", self.path, "hit" if value is not None else "absent")
        return value

    async def save(self, value: T) -> None:
        await asyncio.to_thread(self._write, value)
        logger.debug("Saved %s", self.path)

    def load_sync(self) -> Optional[T]:
        return self._read()

    def save_sync(self, value: T) -> None:
        self._write(value)
