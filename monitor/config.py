from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_KEY_DIR = Path(tempfile.gettempdir()) / "ssh-keys"


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "System Monitor Dashboard"
    debug: bool = False
    log_level: str = "INFO"

    # --- ssh ---
    ssh_key_dir: str = str(DEFAULT_KEY_DIR)
    ssh_connect_timeout: float = 15.0  # seconds
    known_hosts: str | None = None  # None disables host key checking

    # --- probes ---
    probe_timeout: float | None = 30.0  # seconds per remote command
    top_process_limit: int = 20
    disk_path: str = "/"

    # --- server ---
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_prefix": "MONITOR_"}


settings = Settings()
