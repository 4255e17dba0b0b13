# Task board: configuration
# Override values via config/taskboard.yaml, TASKBOARD_DB, or CLI args.

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "taskboard.yaml"


@dataclass
class BoardConfig:
    """Runtime configuration for the task board server."""

    # Store
    db_path: str = "~/.local/share/taskboard/taskboard.db"
    collection: str = "tasks"

    # Web server
    host: str = "127.0.0.1"
    port: int = 3000

    # Page header
    title: str = "Board Infinity"
    subtitle: str = "Your Task Management Dashboard"

    # Live stream
    stream_keepalive_secs: float = 15.0

    log_level: str = "INFO"

    def resolve_paths(self):
        """Apply env overrides and expand ~."""
        env_db = os.environ.get("TASKBOARD_DB")
        if env_db:
            self.db_path = env_db
        self.db_path = str(Path(self.db_path).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "BoardConfig":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        known = {f.name for f in fields(cls)}
        cfg = cls()
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
                logger.warning(f"Could not load {cfg_path}, using defaults: {e}")
                cfg = cls()
        cfg.resolve_paths()
        return cfg
