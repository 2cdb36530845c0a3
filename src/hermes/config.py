"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_SLOT_KEYS = ("coral", "amber", "sage", "sky", "lavender")


def _get_default_workspace() -> Path:
    """Get the default workspace folder inside the user's Documents."""
    return Path.home() / "Documents" / "Hermes"


def default_workspace() -> Path:
    """Return the default workspace, creating it if needed."""
    path = _get_default_workspace()
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass(slots=True)
class AppConfig:
    workspace_path: Path | None = None
    slot_keys: tuple[str, ...] = DEFAULT_SLOT_KEYS
    metadata_dir: str = ".hermes"
    index_filename: str = "index.sqlite"
    chat_filename: str = "chat.json"
    title_max_chars: int = 120

    def __post_init__(self) -> None:
        if self.workspace_path is None:
            self.workspace_path = _get_default_workspace()
        self.slot_keys = tuple(self.slot_keys)

    def resolve_workspace(self, base_dir: Path | None = None) -> Path:
        if self.workspace_path is None:
            self.workspace_path = _get_default_workspace()
        path = Path(self.workspace_path).expanduser()
        if path.is_absolute() or base_dir is None:
            return path
        return base_dir / path

    def index_path(self, root: Path) -> Path:
        return Path(root) / self.metadata_dir / self.index_filename

    def chat_path(self, root: Path) -> Path:
        return Path(root) / self.chat_filename
