"""
Tests for the command runner, selectors, spell-check and systemd bindings.
"""

import pytest

from hostctl.adapters.mock import MockAdapter
from hostctl.adapters.registry import AdapterRegistry
from hostctl.core.models.config import HostConfig
from hostctl.core.services.interaction import FzfSelector, Prompter
from hostctl.core.services.runner import CommandError, CommandRunner, ToolMissingError
from hostctl.core.services.service_pipeline import ServicePipeline, build_service_pipeline
from hostctl.core.services.spellcheck import AspellAdvisor, NullAdvisor, build_advisor
from hostctl.core.services.systemd_ops import (
    LIST_UNIT_FILES,
    SystemctlExecutor,
    SystemdUnitEnumerator,
    parse_unit_list,
    systemctl_argv,
)

UNIT_LIST = """\
nginx.service                 enabled  enabled
sshd.service                  enabled  enabled

getty@.service                enabled  enabled
"""

LIST_KEY = " ".join(LIST_UNIT_FILES)


# ── Runner ───────────────────────────────────────────────────────────


class TestCommandRunner:
    def test_run_builds_action(self, runner: CommandRunner, mock_shell: MockAdapter):
        runner.run(["git", "status"], stdio="inherit", mutating=True, cwd="/tmp")
        action = mock_shell.call_log[0].action
        assert action.argv == ["git", "status"]
        assert action.stdio == "inherit"
        assert action.mutating
        assert action.cwd == "/tmp"
        assert action.id.startswith("git-")

    def test_require_reports_all_missing(self, runner: CommandRunner, mock_shell: MockAdapter):
        mock_shell.set_missing("rg", "bat")
        with pytest.raises(ToolMissingError) as exc:
            runner.require("rg", "fzf", "bat")
        assert exc.value.tools == ["rg", "bat"]
        assert "rg, bat" in str(exc.value)

    def test_unavailable_adapter_has_no_tools(self):
        reg = AdapterRegistry()
        reg.register(MockAdapter(available=False))
        assert not CommandRunner(reg).available("git")
        assert not CommandRunner(AdapterRegistry()).available("git")

    def test_require_custom_message(self, runner: CommandRunner, mock_shell: MockAdapter):
        mock_shell.set_missing("zoxide")
        with pytest.raises(ToolMissingError, match="please install"):
            runner.require("zoxide", message="please install zoxide")

    def test_query_returns_stdout(self, runner: CommandRunner, mock_shell: MockAdapter):
        mock_shell.set_output("hostname", "nixos")
        assert runner.query(["hostname"], what="read hostname") == "nixos"

    def test_query_failure(self, runner: CommandRunner, mock_shell: MockAdapter):
        mock_shell.set_failure("hostname", error="no")
        with pytest.raises(CommandError, match="Failed to read hostname"):
            runner.query(["hostname"], what="read hostname")

    def test_dry_run_follows_registry(self, runner: CommandRunner, registry):
        registry.set_dry_run(True)
        assert runner.dry_run
        receipt = runner.run(["git", "add", "."], mutating=True)
        assert receipt.skipped


# ── Selector ─────────────────────────────────────────────────────────


class TestFzfSelector:
    def test_feeds_options_and_returns_first_line(self, runner, mock_shell):
        mock_shell.set_output("fzf", "sshd.service\n")
        chosen = FzfSelector(runner).select(["nginx.service", "sshd.service"], "Select service: ")
        assert chosen == "sshd.service"
        action = mock_shell.call_log[0].action
        assert action.argv == ["fzf", "--prompt", "Select service: "]
        assert action.stdio == "select"
        assert action.input == "nginx.service\nsshd.service"

    @pytest.mark.parametrize("code", [1, 130])
    def test_cancel_is_empty(self, runner, mock_shell, code):
        mock_shell.set_output("fzf", "", return_code=code)
        assert FzfSelector(runner).select(["a"], "Pick: ") == ""

    def test_other_failure_raises(self, runner, mock_shell):
        mock_shell.set_output("fzf", "", return_code=2)
        with pytest.raises(CommandError):
            FzfSelector(runner).select(["a"], "Pick: ")

    def test_missing_binary(self, runner, mock_shell):
        mock_shell.set_missing("fzf")
        with pytest.raises(ToolMissingError):
            FzfSelector(runner).select(["a"], "Pick: ")

    def test_with_args(self, runner, mock_shell):
        selector = FzfSelector(runner, binary="sk").with_args("--preview", "cat {}")
        selector.select(["a"], "Pick: ")
        assert mock_shell.commands[0] == ["sk", "--prompt", "Pick: ", "--preview", "cat {}"]


# ── Spell-check ──────────────────────────────────────────────────────


class TestAdvisor:
    def test_aspell_lists_unknown_words(self, runner, mock_shell):
        mock_shell.set_output("aspell list", "nginx\n")
        assert AspellAdvisor(runner).suggest("nginx.service") == ["nginx"]
        assert mock_shell.call_log[0].action.input == "nginx.service"

    def test_aspell_failure_is_silent(self, runner, mock_shell):
        mock_shell.set_failure("aspell")
        assert AspellAdvisor(runner).suggest("nginx.service") == []

    def test_build_advisor(self, runner, mock_shell):
        assert isinstance(build_advisor(runner), AspellAdvisor)
        assert isinstance(build_advisor(runner, enabled=False), NullAdvisor)
        mock_shell.set_missing("aspell")
        assert isinstance(build_advisor(runner), NullAdvisor)


# ── systemd ──────────────────────────────────────────────────────────


class TestParseUnitList:
    def test_first_token_per_line(self):
        assert parse_unit_list(UNIT_LIST) == ["nginx.service", "sshd.service", "getty@.service"]

    def test_empty(self):
        assert parse_unit_list("") == []


class TestSystemdUnitEnumerator:
    def test_lists_units(self, runner, mock_shell):
        mock_shell.set_output(LIST_KEY, UNIT_LIST)
        assert SystemdUnitEnumerator(runner).list_units()[:2] == ["nginx.service", "sshd.service"]
        assert mock_shell.commands == [LIST_UNIT_FILES]

    def test_missing_systemctl(self, runner, mock_shell):
        mock_shell.set_missing("systemctl")
        with pytest.raises(ToolMissingError):
            SystemdUnitEnumerator(runner).list_units()

    def test_query_failure(self, runner, mock_shell):
        mock_shell.set_failure(LIST_KEY, error="Failed to connect to bus")
        with pytest.raises(CommandError, match="list service unit files"):
            SystemdUnitEnumerator(runner).list_units()


class TestSystemctlExecutor:
    def test_argv(self):
        assert systemctl_argv("restart", "nginx.service", ["sudo"]) == [
            "sudo", "systemctl", "restart", "nginx.service",
        ]
        assert systemctl_argv("enable-now", "sshd.service") == [
            "systemctl", "enable", "--now", "sshd.service",
        ]
        assert systemctl_argv("reload", "nginx.service") == ["systemctl", "reload", "nginx.service"]

    def test_describe(self, runner):
        executor = SystemctlExecutor(runner)
        assert executor.describe("disable-now", "a.service") == (
            "sudo systemctl disable --now a.service"
        )

    def test_execute_propagates_exit_code(self, runner, mock_shell):
        mock_shell.set_output("sudo", "", return_code=5)
        assert SystemctlExecutor(runner).execute("restart", "nginx.service") == 5
        action = mock_shell.call_log[0].action
        assert action.stdio == "inherit"
        assert action.mutating

    def test_execute_without_privilege(self, runner, mock_shell):
        assert SystemctlExecutor(runner, privilege_command=[]).execute("status", "x.service") == 0
        assert mock_shell.commands == [["systemctl", "status", "x.service"]]

    def test_dry_run_skips(self, runner, registry, mock_shell):
        registry.set_dry_run(True)
        assert SystemctlExecutor(runner).execute("stop", "nginx.service") == 0
        assert mock_shell.call_count == 0


class TestBuildServicePipeline:
    def test_wires_configuration(self, runner, mock_shell):
        config = HostConfig.model_validate({
            "services": {"privilege_command": ["doas"]},
            "terminal": {"selector": "sk"},
        })
        mock_shell.set_output(LIST_KEY, UNIT_LIST)
        mock_shell.set_output("sk --prompt 'Select service: '", "sshd.service")

        class AlwaysYes(Prompter):
            def ask(self, question):
                return ""

            def info(self, message):
                pass

            def warn(self, message):
                pass

            def notice(self, message):
                pass

        pipeline = build_service_pipeline(runner, config, prompter=AlwaysYes())
        assert isinstance(pipeline, ServicePipeline)
        result = pipeline.run(action="restart")

        assert result.executed
        assert result.command == "doas systemctl restart sshd.service"
        assert mock_shell.commands[-1] == ["doas", "systemctl", "restart", "sshd.service"]
