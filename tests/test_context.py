import os

import pytest

from misesetup.core.context import (
    ActionContext,
    escape_data,
    escape_property,
    to_command_value,
)


class TestInputs:
    def test_input_from_env(self, context, env):
        env["INPUT_VERSION"] = " 2024.5.0 \n"

        assert context.get_input("version") == "2024.5.0"

    def test_input_falls_back_to_default(self, context):
        assert context.get_input("cache_key_prefix") == "mise-v0"
        assert context.get_input("unknown") == ""

    def test_explicit_empty_input_is_not_replaced(self, context, env):
        env["INPUT_CACHE_KEY_PREFIX"] = ""

        assert context.get_input("cache_key_prefix") == ""

    def test_boolean_input(self, context, env):
        env["INPUT_INSTALL"] = "False"

        assert context.get_boolean_input("install") is False
        assert context.get_boolean_input("cache") is True

    def test_invalid_boolean_input(self, context, env):
        env["INPUT_CACHE"] = "yes"

        with pytest.raises(TypeError):
            context.get_boolean_input("cache")

    def test_state(self, context, env):
        env["STATE_PRIMARY_KEY"] = "mise-v0-linux-x64-abc"

        assert context.get_state("PRIMARY_KEY") == "mise-v0-linux-x64-abc"
        assert context.get_state("CACHE_KEY") == ""

    def test_workspace(self, context, env, workdir):
        assert context.workspace == str(workdir)

        env["GITHUB_WORKSPACE"] = "/github/workspace"
        assert context.workspace == "/github/workspace"


class TestFileCommands:
    def test_command_values(self):
        assert to_command_value(True) == "true"
        assert to_command_value(False) == "false"
        assert to_command_value(3) == "3"

    def test_set_output(self, context, outputs):
        context.set_output("cache-hit", False)

        assert outputs() == {"cache-hit": "false"}

    def test_save_state_multiline(self, context, state):
        context.save_state("BODY", "line one\nline two")

        assert state() == {"BODY": "line one\nline two"}

    def test_export_variable(self, context, env, exported):
        context.export_variable("FOO", "bar")

        assert env["FOO"] == "bar"
        assert exported() == {"FOO": "bar"}

    def test_add_path_prepends(self, context, env, added_paths):
        context.add_path("/opt/mise/bin")

        assert env["PATH"].split(os.pathsep)[0] == "/opt/mise/bin"
        assert "/usr/bin" in env["PATH"].split(os.pathsep)
        assert added_paths() == ["/opt/mise/bin"]

    def test_add_path_to_empty_path(self, context, env):
        del env["PATH"]
        context.add_path("/opt/mise/bin")

        assert env["PATH"] == "/opt/mise/bin"


class TestStdoutCommands:
    @pytest.fixture
    def bare_context(self, workdir):
        return ActionContext(env={"PATH": "/usr/bin"}, cwd=str(workdir), defaults={})

    def test_set_output_without_file(self, bare_context, capsys):
        bare_context.set_output("cache-hit", True)

        assert "::set-output name=cache-hit::true" in capsys.readouterr().out

    def test_add_path_without_file(self, bare_context, capsys):
        bare_context.add_path("/opt/bin")

        assert "::add-path::/opt/bin" in capsys.readouterr().out
        assert bare_context.env["PATH"] == os.pathsep.join(["/opt/bin", "/usr/bin"])

    def test_group(self, bare_context, capsys):
        with bare_context.group("Setup mise"):
            bare_context.info("inside")

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["::group::Setup mise", "inside", "::endgroup::"]

    def test_group_closes_on_error(self, bare_context, capsys):
        with pytest.raises(RuntimeError):
            with bare_context.group("Failing"):
                raise RuntimeError("boom")

        assert capsys.readouterr().out.splitlines()[-1] == "::endgroup::"

    def test_set_failed(self, bare_context, capsys):
        bare_context.set_failed("Failed to run mise env: nope")

        assert bare_context.failed is True
        assert bare_context.exit_code == 1
        assert "::error::Failed to run mise env: nope" in capsys.readouterr().out

    def test_multiline_failure_is_one_annotation(self, bare_context, capsys):
        bare_context.set_failed("Failed to run mise env: line one\nline two 100%")

        out = capsys.readouterr().out
        error_lines = [line for line in out.splitlines() if line.startswith("::error::")]
        assert error_lines == ["::error::Failed to run mise env: line one%0Aline two 100%25"]
        assert out.count("\n") == 1

    def test_group_title_is_escaped(self, bare_context, capsys):
        with bare_context.group("Writing\r\n.mise.toml"):
            pass

        assert capsys.readouterr().out.splitlines()[0] == "::group::Writing%0D%0A.mise.toml"

    def test_property_values_are_escaped(self, bare_context, capsys):
        bare_context.save_state("KEY,A:B", "value")

        assert "::save-state name=KEY%2CA%3AB::value" in capsys.readouterr().out


class TestEscaping:
    def test_escape_data(self):
        assert escape_data("50%\r\ndone") == "50%25%0D%0Adone"
        assert escape_data("a:b,c") == "a:b,c"

    def test_escape_property(self):
        assert escape_property("a:b,c%\n") == "a%3Ab%2Cc%25%0A"
