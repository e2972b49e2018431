"""Configuration management for the Permafy CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path


class Config:
    """
    CLI settings kept in a JSON file (~/.permafy/config.json).

    Missing keys fall back to DEFAULT_CONFIG. A file that cannot be parsed
    is copied aside to config.json.bak and defaults are used instead.
    """

    DEFAULT_CONFIG = {
        "archiver_host": os.environ.get("PERMAFY_ARCHIVER_HOST", "localhost"),
        "archiver_port": int(os.environ.get("PERMAFY_ARCHIVER_PORT", "8000")),
        # archival waits on IPFS fetches of up to 50s per file
        "timeout": 120,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
    }

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.data = self._load()

    def _ensure_directory(self) -> None:
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.permafy' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def _backup_corrupted(self) -> None:
        try:
            shutil.copy(self.config_path, self.config_path.with_suffix('.json.bak'))
        except OSError:
            pass

    def _load(self) -> dict:
        self._ensure_directory()
        config = dict(self.DEFAULT_CONFIG)

        if not self.config_path.exists():
            self.data = config
            self.save()
            return config

        try:
            with open(self.config_path, 'r') as f:
                config.update(json.load(f))
        except (ValueError, TypeError, OSError):
            self._backup_corrupted()
            return dict(self.DEFAULT_CONFIG)
        return config

    def save(self) -> None:
        """Write current settings back to disk; an unwritable file is ignored."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError:
            pass

    def get_base_url(self) -> str:
        """Archiver base URL, e.g. "http://localhost:8000"."""
        host = self.data.get('archiver_host', 'localhost')
        port = self.data.get('archiver_port', 8000)
        return f"http://{host}:{port}"

    def get_timeout(self) -> int:
        return self.data.get('timeout', 120)

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries', 3),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }
