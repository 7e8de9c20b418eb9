from __future__ import annotations

"""
One-shot registration of this server in MCP client config files.

Each supported client keeps a JSON settings file with a map of MCP
servers.  :func:`install` merges an ``antigravity-skills`` entry into
that map, leaving every other key alone.
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from .config import SERVER_NAME


@dataclass(frozen=True)
class ClientTarget:
    name: str
    path: Path
    servers_key: str = "mcpServers"
    stdio_type: bool = False
    alt_path: Optional[Path] = None

    def config_path(self) -> Path:
        """The primary file, unless only the alternate location exists on this machine."""
        if not self.path.parent.exists() and self.alt_path is not None and self.alt_path.parent.exists():
            return self.alt_path
        return self.path


def client_targets(home: Optional[Path] = None) -> Dict[str, ClientTarget]:
    home = Path(home) if home is not None else Path.home()
    return {
        "gemini": ClientTarget("Gemini CLI", home / ".gemini" / "settings.json"),
        "claude": ClientTarget(
            "Claude Desktop",
            home / ".config" / "claude" / "mcp_config.json",
            alt_path=home / "AppData" / "Roaming" / "Claude" / "claude_desktop_config.json",
        ),
        "cursor": ClientTarget("Cursor", home / ".cursor" / "mcp.json"),
        "vscode": ClientTarget("VS Code", home / ".vscode" / "mcp.json", servers_key="servers", stdio_type=True),
        "copilot": ClientTarget("GitHub Copilot", home / ".github-copilot" / "mcp.json"),
        "opencode": ClientTarget("OpenCode", home / ".opencode" / "mcp.json"),
    }


def server_entry(stdio_type: bool = False) -> dict:
    entry = {"command": sys.executable, "args": ["-m", "skills_server.cli", "serve"]}
    if stdio_type:
        entry = {"type": "stdio", **entry}
    return entry


def _read_config(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Config {} is unreadable ({}); starting a fresh one", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def install(target: ClientTarget) -> Path:
    path = target.config_path()
    config = _read_config(path)
    servers = config.get(target.servers_key)
    if not isinstance(servers, dict):
        servers = {}
    servers[SERVER_NAME] = server_entry(target.stdio_type)
    config[target.servers_key] = servers

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    logger.info("Configured {} at {}", target.name, path)
    return path


def install_clients(client: str, home: Optional[Path] = None) -> List[Path]:
    """Install for one client key, or every known client with ``all``."""
    targets = client_targets(home)
    if client == "all":
        chosen = list(targets.values())
    elif client in targets:
        chosen = [targets[client]]
    else:
        raise ValueError(f"Unknown client {client!r}; expected one of {sorted(targets)} or 'all'")
    return [install(t) for t in chosen]
