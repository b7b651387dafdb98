"""Session persistence for the Monofile CLI.

The ingestion pipeline never touches this module; the CLI injects a store and
decides when to read or write it.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from .errors import MissingSessionError, SessionError
from .models import SESSION_VERSION, ConceptBundle, SessionBundle, SessionOutputs

DEFAULT_SESSION_PATH = Path("~/.monofile/session.json")


class SessionStore:
    """Persist the last result bundle as a JSON document."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Location of the session file; defaults to ``~/.monofile/session.json``.
        """
        self._path = (path or DEFAULT_SESSION_PATH).expanduser()

    @property
    def path(self) -> Path:
        """Return the resolved session file path."""
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> SessionBundle:
        """Load the stored bundle.

        Returns:
            SessionBundle: The persisted bundle.

        Raises:
            MissingSessionError: If nothing has been stored.
            SessionError: If the stored data is unreadable or from another version.
        """
        if not self._path.exists():
            raise MissingSessionError(f"No session found at {self._path}")

        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SessionError(f"Unable to read session file {self._path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SessionError(f"Invalid session data: {exc}") from exc

        if not isinstance(data, dict) or data.get("version") != SESSION_VERSION:
            raise SessionError(f"Unsupported session version in {self._path}")

        try:
            return SessionBundle.model_validate(data)
        except ValidationError as exc:
            raise SessionError(f"Invalid session data: {exc}") from exc

    def save(self, bundle: SessionBundle) -> None:
        """Write ``bundle``, replacing any previous session."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = bundle.model_dump(mode="json", by_alias=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def clear(self) -> bool:
        """Delete the stored session, returning True when one existed.

        Raises:
            SessionError: If the session path exists but cannot be removed.
        """
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise SessionError(f"Unable to remove session file {self._path}: {exc}") from exc
        return True


__all__ = [
    "DEFAULT_SESSION_PATH",
    "ConceptBundle",
    "MissingSessionError",
    "SessionBundle",
    "SessionError",
    "SessionOutputs",
    "SessionStore",
]
