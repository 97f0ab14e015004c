"""
Host configuration model — loaded from hostctl.yml.

Every field has a default, so a missing config file means
"use the stock recipes as-is".
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ServiceSettings(BaseModel):
    """Interactive systemctl management."""

    privilege_command: list[str] = Field(default_factory=lambda: ["sudo"])
    strict_actions: bool = False    # reject actions outside the closed set
    spellcheck: bool = True


class TerminalSettings(BaseModel):
    """Interactive tools and the programs launched for the user."""

    selector: str = "fzf"
    editor: str | None = None       # falls back to $EDITOR, then nano
    shell: str | None = None        # falls back to $SHELL, then bash
    man_browser: str = "firefox"
    file_excludes: list[str] = Field(default_factory=lambda: [".git", "node_modules"])


class NixSettings(BaseModel):
    """NixOS rebuild, flake and garbage-collection recipes."""

    flake: str = ".#nixos"
    target_host: str | None = None
    flake_subdirs: list[str] = Field(default_factory=lambda: ["nix-ld-dir"])
    logs_dir: str = "logs"


class GitSettings(BaseModel):
    diff_excludes: list[str] = Field(
        default_factory=lambda: ["flake.lock", "pkgs/_sources/*"]
    )
    formatter: str = "treefmt"


class HostConfig(BaseModel):
    """Root configuration for all recipes."""

    version: int = 1

    services: ServiceSettings = Field(default_factory=ServiceSettings)
    terminal: TerminalSettings = Field(default_factory=TerminalSettings)
    nix: NixSettings = Field(default_factory=NixSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    knowledge_script: str = "nixos/tools/knowledge-system.sh"
