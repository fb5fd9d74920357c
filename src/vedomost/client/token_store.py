from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Protocol


class TokenStore(Protocol):
    """Where the bearer token is persisted between runs."""

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class JsonFileTokenStore(TokenStore):
    """Keeps the token in a small JSON file, e.g. ``~/.vedomost/session.json``."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def get(self) -> Optional[str]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except ValueError:
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
