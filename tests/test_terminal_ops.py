"""
Tests for the file picker, directory jump, listings, man pages and knowledge script.
"""

import stat
from pathlib import Path

import pytest

from hostctl.core.models.config import HostConfig
from hostctl.core.services import files_ops, jump_ops, knowledge_ops, system_ops
from hostctl.core.services.runner import CommandError, ToolMissingError


class TestFiles:
    def test_list_files_excludes(self, runner, mock_shell, config, tmp_path: Path):
        mock_shell.set_output("rg", "a.nix\nsub/b.nix\n")
        files = files_ops.list_files(runner, tmp_path, config.terminal.file_excludes)
        assert files == ["a.nix", "sub/b.nix"]
        assert mock_shell.commands[0] == [
            "rg", "--files", "--hidden", "--glob", "!.git", "--glob", "!node_modules",
        ]
        assert mock_shell.call_log[0].action.cwd == str(tmp_path)

    def test_list_files_nothing_found(self, runner, mock_shell, tmp_path: Path):
        mock_shell.set_output("rg", "", return_code=1)
        assert files_ops.list_files(runner, tmp_path, []) == []

    def test_list_files_error(self, runner, mock_shell, tmp_path: Path):
        mock_shell.set_output("rg", "", return_code=2)
        with pytest.raises(CommandError):
            files_ops.list_files(runner, tmp_path, [])

    def test_pick_file_preview(self, runner, mock_shell, config, tmp_path: Path):
        mock_shell.set_output("rg", "a.nix")
        mock_shell.set_output("fzf", "a.nix")
        assert files_ops.pick_file(runner, config, tmp_path) == "a.nix"
        fzf = mock_shell.calls_to("fzf")[0]
        assert fzf[:3] == ["fzf", "--prompt", "Select file: "]
        assert files_ops.PREVIEW_COMMAND in fzf

    def test_pick_file_missing_tools(self, runner, mock_shell, config, tmp_path: Path):
        mock_shell.set_missing("bat")
        with pytest.raises(ToolMissingError, match="ripgrep, fzf, bat"):
            files_ops.pick_file(runner, config, tmp_path)
        assert mock_shell.call_count == 0

    def test_resolve_editor(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "vim")
        assert files_ops.resolve_editor(HostConfig()) == ["vim"]
        config = HostConfig.model_validate({"terminal": {"editor": "code --wait"}})
        assert files_ops.resolve_editor(config) == ["code", "--wait"]
        monkeypatch.delenv("EDITOR")
        assert files_ops.resolve_editor(HostConfig()) == ["nano"]

    def test_open_in_editor(self, runner, mock_shell, tmp_path: Path):
        files_ops.open_in_editor(runner, tmp_path / "a.nix", ["vim"])
        assert mock_shell.commands == [["vim", str(tmp_path / "a.nix")]]
        assert mock_shell.call_log[0].action.stdio == "inherit"


class TestJump:
    def test_query(self, runner, mock_shell):
        mock_shell.set_output("zoxide", "/home/me/nixos\n")
        assert jump_ops.query_directory(runner, "nix") == "/home/me/nixos"
        assert mock_shell.commands == [["zoxide", "query", "-i", "nix"]]
        assert mock_shell.call_log[0].action.stdio == "select"

    @pytest.mark.parametrize("code", [1, 130])
    def test_nothing_found(self, runner, mock_shell, code):
        mock_shell.set_output("zoxide", "", return_code=code)
        assert jump_ops.query_directory(runner) == ""

    def test_missing_zoxide(self, runner, mock_shell):
        mock_shell.set_missing("zoxide")
        with pytest.raises(ToolMissingError):
            jump_ops.query_directory(runner)

    def test_launch_shell(self, runner, mock_shell, tmp_path: Path):
        jump_ops.launch_shell(runner, tmp_path, "zsh")
        action = mock_shell.call_log[0].action
        assert action.argv == ["zsh"]
        assert action.cwd == str(tmp_path)

    def test_resolve_shell(self, monkeypatch):
        monkeypatch.setenv("SHELL", "/bin/fish")
        assert jump_ops.resolve_shell(HostConfig()) == "/bin/fish"
        monkeypatch.delenv("SHELL")
        assert jump_ops.resolve_shell(HostConfig()) == "bash"


class TestSystem:
    def test_listings(self, runner, mock_shell):
        system_ops.list_directories(runner)
        system_ops.list_all(runner)
        assert mock_shell.commands == [["eza", "-D"], ["eza", "-ola"]]

    def test_man(self, runner, mock_shell):
        system_ops.open_man_page(runner, "systemctl", "firefox")
        assert mock_shell.commands == [["man", "--html=firefox", "--all", "systemctl"]]


class TestKnowledge:
    def _script(self, tmp_path: Path) -> Path:
        tools = tmp_path / "nixos" / "tools"
        tools.mkdir(parents=True)
        script = tools / "knowledge-system.sh"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o644)
        return script

    def test_make_executable(self, tmp_path: Path):
        script = self._script(tmp_path)
        knowledge_ops.make_executable(script)
        assert stat.S_IMODE(script.stat().st_mode) == 0o755

    def test_forwards_arguments(self, runner, mock_shell, tmp_path: Path):
        script = self._script(tmp_path)
        knowledge_ops.run_knowledge(runner, script, "learn", "build", "oom", "add swap")
        assert mock_shell.commands == [[str(script), "learn", "build", "oom", "add swap"]]
        assert mock_shell.call_log[0].action.mutating

    def test_read_only_commands(self, runner, mock_shell, tmp_path: Path):
        script = self._script(tmp_path)
        knowledge_ops.run_knowledge(runner, script, "report")
        assert not mock_shell.call_log[0].action.mutating

    def test_missing_script(self, runner, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            knowledge_ops.run_knowledge(runner, tmp_path / "nope.sh", "report")

    def test_init(self, runner, mock_shell, tmp_path: Path):
        script = self._script(tmp_path)
        helper = script.parent / "lib" / "helper.sh"
        helper.parent.mkdir()
        helper.write_text("")
        helper.chmod(0o644)

        knowledge_ops.init_knowledge(runner, script)

        assert helper.stat().st_mode & stat.S_IXUSR
        assert mock_shell.commands == [[str(script), "init"], [str(script), "hook"]]

    def test_init_stops_on_failure(self, runner, mock_shell, tmp_path: Path):
        script = self._script(tmp_path)
        mock_shell.set_failure(str(script))
        receipt = knowledge_ops.init_knowledge(runner, script)
        assert receipt.failed
        assert len(mock_shell.commands) == 1
