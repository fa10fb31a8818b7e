"""Server setup helper for the role sync server.

Provides CLI parsing, the `SyncConfig` record and a YAML store for it,
plus the template and interactive setup flows. Storage interaction goes
through the `StorageBackend` handed in by callers.
"""
from __future__ import annotations
import argparse
import sys
from dataclasses import dataclass, asdict, fields
from typing import Any, Iterable, Optional

import yaml

from rolesync_lib.storage.base import StorageBackend

STORE_NS = "config"
STORE_KEY = "server_config"

DEFAULT_REQUEST_DELAY = 0.333
DEFAULT_WEBHOOK_PATH = "/members"
DEFAULT_TECHNICAL_LEAD_PATTERN = "Lead"

# Module-level place to hold the loaded SyncConfig instance after setup
_loaded_config: list[SyncConfig] = []


def get_loaded_config() -> Optional[SyncConfig]:
    """Return the loaded SyncConfig if available, otherwise None."""
    return _loaded_config[0] if _loaded_config else None


@dataclass
class SyncConfig:
    guild_id: int = 0
    members_database_id: str = ""
    discord_username_property: str = "Discord"
    active_property: str = "Active"
    club_positions_property: str = "Club Positions"
    teams_property: str = "Teams"
    team_name_property: str = "Name"
    inactive_role_id: int = 0
    technical_lead_role_id: int = 0
    technical_lead_pattern: str = DEFAULT_TECHNICAL_LEAD_PATTERN
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY
    webhook_path: str = DEFAULT_WEBHOOK_PATH
    log_level: str = "INFO"
    sweep_interval_minutes: int = 0
    sweep_dry_run: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> SyncConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        cfg = cls(**values)
        cfg.guild_id = int(cfg.guild_id)
        cfg.inactive_role_id = int(cfg.inactive_role_id)
        cfg.technical_lead_role_id = int(cfg.technical_lead_role_id)
        cfg.request_delay_seconds = float(cfg.request_delay_seconds)
        cfg.sweep_interval_minutes = int(cfg.sweep_interval_minutes)
        if not cfg.webhook_path.startswith("/"):
            cfg.webhook_path = "/" + cfg.webhook_path
        return cfg


class YamlConfigStore:
    """Serialize/deserialize SyncConfig to YAML using a StorageBackend."""

    def __init__(self, backend: StorageBackend, namespace: str = STORE_NS):
        self.backend = backend
        self.namespace = namespace

    def exists(self, key: str = STORE_KEY) -> bool:
        return self.backend.exists(self.namespace, key)

    def save(self, key: str, cfg: SyncConfig) -> None:
        payload = yaml.safe_dump(asdict(cfg), sort_keys=False)
        self.backend.save(self.namespace, key, payload)

    def load(self, key: str = STORE_KEY) -> SyncConfig:
        raw = self.backend.load(self.namespace, key)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            data: Any = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError("invalid config format: parse error") from e
        if not isinstance(data, dict):
            raise ValueError("invalid config format: expected mapping")
        try:
            return SyncConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid config format: {e}") from e


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("--setup", action="store_true", help="Run initial setup interactively")
    p.add_argument("--print-template", action="store_true", help="Write the default YAML template to storage and exit")
    p.add_argument("--sync-all", action="store_true", help="Run one full role sweep and exit")
    p.add_argument("--apply", action="store_true", help="With --sync-all, apply changes instead of a dry run")
    p.add_argument("--data-dir", default="data", help="Directory holding config/server_config.yml")
    p.add_argument("--host", default="0.0.0.0", help="Address to serve the webhook listener on")
    p.add_argument("--port", type=int, default=8000, help="Port to serve the webhook listener on")
    p.add_argument("--help", action="store_true", help="Show setup help")
    return p


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    """Parse setup-related args from argv, ignoring unknown ones."""
    parser = get_parser()
    if argv is not None:
        argv = list(argv)
    args, _ = parser.parse_known_args(argv)
    return args


def create_template(store: YamlConfigStore, namespace: str, key: str) -> tuple[bool, str]:
    store.save(key, SyncConfig())
    return True, f"Wrote template server config to storage {namespace}/{key}\n"


def _ask(prompt: str, default: Any) -> str:
    return input(f"{prompt} [{default}]: ").strip() or str(default)


def _ask_int(prompt: str, default: int) -> int:
    while True:
        answer = _ask(prompt, default)
        try:
            return int(answer)
        except ValueError:
            print("Please enter a number")


def interactive_setup(store: YamlConfigStore, namespace: str, key: str) -> tuple[bool, str]:
    defaults = SyncConfig()
    try:
        print("Server configuration not found. Starting interactive setup.")
        cfg = SyncConfig(
            guild_id=_ask_int("Discord guild id", defaults.guild_id),
            members_database_id=_ask("Notion members database id", defaults.members_database_id),
            discord_username_property=_ask("Discord username property", defaults.discord_username_property),
            active_property=_ask("Active status property", defaults.active_property),
            club_positions_property=_ask("Club positions property", defaults.club_positions_property),
            teams_property=_ask("Teams relation property", defaults.teams_property),
            team_name_property=_ask("Team name (title) property", defaults.team_name_property),
            inactive_role_id=_ask_int("Inactive role id", defaults.inactive_role_id),
            technical_lead_role_id=_ask_int("Technical lead role id", defaults.technical_lead_role_id),
            technical_lead_pattern=_ask("Technical lead position pattern (regex)", defaults.technical_lead_pattern),
        )
    except (EOFError, KeyboardInterrupt):
        return False, "setup aborted"
    store.save(key, cfg)
    return True, f"Wrote server config to storage {namespace}/{key}"


def setup(argv: Optional[Iterable[str]], storage: StorageBackend, namespace: str = STORE_NS, key: str = STORE_KEY) -> int:
    """High-level helper used by the application entrypoint.

    - If the config exists in `storage` it is loaded into module state and returns 0.
    - `--print-template` writes the default template and returns 0.
    - `--setup` (or an interactive terminal) runs the interactive flow.
    - Otherwise prints instructions and returns 2.
    """
    args = parse_args(argv)
    store = YamlConfigStore(storage, namespace=namespace)

    if store.exists(key):
        try:
            cfg = store.load(key)
        except ValueError as e:
            print(f"Failed to load server config: {e}")
            return 1
        _loaded_config.clear()
        _loaded_config.append(cfg)
        return 0

    if args.print_template:
        created, message = create_template(store, namespace, key)
        if created:
            sys.stdout.write(message)
            return 0
        return 1

    if args.setup or sys.stdin.isatty():
        created, message = interactive_setup(store, namespace, key)
        if not created:
            print("Setup failed:", message)
            return 1
        try:
            cfg = store.load(key)
        except (KeyError, ValueError) as e:
            print("Failed to load config after setup:", e)
            return 1
        _loaded_config.clear()
        _loaded_config.append(cfg)
        return 0

    print(
        "Server configuration missing. Run: `python3 rolesync.py --setup` to create the configuration."
    )
    return 2
