"""
Nix & NixOS operations — rebuilds, flake maintenance, package lookup, GC.

Channel-independent: the CLI and the refresh workflow both call these.
Commands that change the system are marked ``mutating`` so ``--dry-run``
skips them; commands that need root are prefixed with the configured
privilege command.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services.interaction import FzfSelector
from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)

CONTAINER_MARKER = Path("/.dockerenv")
SYSTEM_PROFILE = "/nix/var/nix/profiles/system"
NIXPKGS_FLAKE = "flake:nixpkgs"


def in_container(marker: Path = CONTAINER_MARKER) -> bool:
    """Whether we are running inside a Docker container."""
    return marker.is_file()


def privileged(argv: list[str], config: HostConfig, elevate: bool = True) -> list[str]:
    """Prefix ``argv`` with the privilege command unless ``elevate`` is False."""
    if not elevate:
        return list(argv)
    return [*config.services.privilege_command, *argv]


# ═══════════════════════════════════════════════════════════════════
#  NixOS
# ═══════════════════════════════════════════════════════════════════


def list_generations(runner: CommandRunner) -> Receipt:
    runner.require("nixos-rebuild")
    return runner.run(["nixos-rebuild", "list-generations"], stdio="inherit")


def rebuild_argv(
    config: HostConfig,
    fast: bool = False,
    target_host: str | None = None,
) -> list[str]:
    argv = ["nixos-rebuild", "switch", "--flake", config.nix.flake]
    if fast:
        argv.append("--fast")
    if target_host:
        argv += ["--target-host", target_host]
    return privileged(argv, config)


def rebuild(
    runner: CommandRunner,
    config: HostConfig,
    fast: bool = False,
    target_host: str | None = None,
    cwd: Path | None = None,
) -> Receipt:
    """``nixos-rebuild switch`` against the configured flake."""
    runner.require("nixos-rebuild")
    argv = rebuild_argv(config, fast=fast, target_host=target_host)
    logger.info("Rebuilding %s%s", config.nix.flake, f" on {target_host}" if target_host else "")
    return runner.run(argv, stdio="inherit", mutating=True, cwd=cwd)


def latest_rebuild_log(logs_dir: Path) -> Path | None:
    """Most recently modified ``rebuild*.log`` in ``logs_dir``."""
    if not logs_dir.is_dir():
        return None
    logs = [p for p in logs_dir.glob("rebuild*.log") if p.is_file()]
    if not logs:
        return None
    return max(logs, key=lambda p: p.stat().st_mtime)


# ═══════════════════════════════════════════════════════════════════
#  Flakes
# ═══════════════════════════════════════════════════════════════════


def flake_update(
    runner: CommandRunner,
    inputs: list[str] | None = None,
    repair: bool = False,
    cwd: Path | None = None,
) -> Receipt:
    """``nix flake update [--repair] [INPUT...]``."""
    runner.require("nix")
    argv = ["nix", "flake", "update"]
    if repair:
        argv.append("--repair")
    argv += list(inputs or [])
    return runner.run(argv, stdio="inherit", mutating=True, cwd=cwd)


def flake_lock(runner: CommandRunner, cwd: Path | None = None) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "flake", "lock"], stdio="inherit", mutating=True, cwd=cwd)


def lock_flake_dirs(
    runner: CommandRunner,
    config: HostConfig,
    root: Path,
) -> list[tuple[str, Receipt]]:
    """Lock every configured sub-flake, stopping at the first failure.

    Returns:
        ``(subdir, receipt)`` for each directory attempted; only the
        last one can have failed.
    """
    results: list[tuple[str, Receipt]] = []
    for subdir in config.nix.flake_subdirs:
        receipt = flake_lock(runner, cwd=root / subdir)
        results.append((subdir, receipt))
        if receipt.failed:
            logger.error("Locking %s failed: %s", subdir, receipt.error)
            break
    return results


def flake_root_inputs(runner: CommandRunner, cwd: Path | None = None) -> list[str]:
    """Names of the root flake's direct inputs, from the lock metadata."""
    output = runner.query(["nix", "flake", "metadata", "--json"], what="read flake metadata", cwd=cwd)
    try:
        metadata = json.loads(output)
    except json.JSONDecodeError as e:
        raise ValueError(f"Unexpected output from nix flake metadata: {e}") from e

    nodes = metadata.get("locks", {}).get("nodes", {})
    inputs = nodes.get("root", {}).get("inputs", {})
    return list(inputs)


def update_selected_input(
    runner: CommandRunner,
    config: HostConfig,
    cwd: Path | None = None,
) -> Receipt | None:
    """Pick one root input interactively and update it with ``--repair``.

    Returns None when there was nothing to pick or nothing was picked.
    """
    inputs = flake_root_inputs(runner, cwd=cwd)
    if not inputs:
        return None
    selector = FzfSelector(runner, config.terminal.selector)
    chosen = selector.select(inputs, "Select input: ")
    if not chosen:
        return None
    return flake_update(runner, [chosen], repair=True, cwd=cwd)


def flake_show(runner: CommandRunner, cwd: Path | None = None) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "flake", "show"], stdio="inherit", cwd=cwd)


def flake_check(runner: CommandRunner, cwd: Path | None = None) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "flake", "check"], stdio="inherit", cwd=cwd)


# ═══════════════════════════════════════════════════════════════════
#  Packages
# ═══════════════════════════════════════════════════════════════════


def search(runner: CommandRunner, package: str, verbose: bool = False) -> Receipt:
    """Search nixpkgs: exact name by default, fuzzy and detailed with ``verbose``."""
    runner.require("nix-search")
    if verbose:
        argv = ["nix-search", "--flake", NIXPKGS_FLAKE, "--verbose=true", package]
    else:
        argv = ["nix-search", "--flake", NIXPKGS_FLAKE, "--verbose=0", "-e", package]
    return runner.run(argv, stdio="inherit")


def build_package(runner: CommandRunner, package: str) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "build", f"nixpkgs#{package}"], stdio="inherit", mutating=True)


def shell_with_package(runner: CommandRunner, package: str) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "shell", f"nixpkgs#{package}"], stdio="inherit")


def repl(runner: CommandRunner) -> Receipt:
    runner.require("nix")
    return runner.run(["nix", "repl", "-f", NIXPKGS_FLAKE], stdio="inherit")


# ═══════════════════════════════════════════════════════════════════
#  Garbage collection
# ═══════════════════════════════════════════════════════════════════


def gc_commands(days: int | None = None) -> list[list[str]]:
    """Commands for a GC pass: age-bounded with ``days``, everything without."""
    if days is not None:
        return [
            ["nix", "profile", "wipe-history", "--profile", SYSTEM_PROFILE,
             "--older-than", f"{days}d"],
            ["nix-collect-garbage", "--delete-older-than", f"{days}d"],
        ]
    return [
        ["nix", "store", "gc", "--debug"],
        ["nix-collect-garbage", "-d"],
        ["nix-collect-garbage"],
        ["nix", "store", "optimise"],
    ]


def collect_garbage(
    runner: CommandRunner,
    config: HostConfig,
    days: int | None = None,
    container: bool | None = None,
) -> Receipt:
    """Run the GC commands in order, stopping at the first failure.

    Inside a container the commands run without the privilege command.

    Returns:
        The failing receipt, or the last one when all succeeded.
    """
    if days is not None and days < 0:
        raise ValueError("days must be zero or positive")
    if container is None:
        container = in_container()

    receipts: list[Receipt] = []
    for argv in gc_commands(days):
        runner.require(argv[0])
        receipt = runner.run(
            privileged(argv, config, elevate=not container),
            stdio="inherit",
            mutating=True,
        )
        receipts.append(receipt)
        if receipt.failed:
            logger.error("%s failed: %s", " ".join(argv), receipt.error)
            break

    return receipts[-1]
