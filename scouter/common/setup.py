import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the base folder everything user-specific lives under. SCOUTER_HOME wins outright, otherwise we follow
# APPDATA on Windows and fall back to the home folder everywhere else.
def _resolve_data_root():
    override = os.getenv("SCOUTER_HOME")
    if override:
        return Path(override)
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "Scouter"
    return Path.home() / ".scouter"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    settings: Path

    @staticmethod
    def build():
        data = ensure_directory(_resolve_data_root())
        logs = ensure_directory(data / "logs")

        return ProjectPaths(
            data = data,
            logs = logs,
            settings = data / "settings.json",
        )
PATHS = ProjectPaths.build()
