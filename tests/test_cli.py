"""Tests for the vue-type-check CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from vue_type_check.cli import app

runner = CliRunner()

TEMPLATE_FRAME = """ComponentOne.vue
2:40 Property 'property' does not exist on type '{ value: number; }'.
  0 | <template>
  1 |   <div id="app">
> 2 |     <p v-for="item in items" :key="item.property">{{ item.value }}</p>
    |                                         ^^^^^^^^
  3 |   </div>
  4 | </template>
"""

SCRIPT_FRAME = """ComponentOne.vue
22:26 Property 'what' does not exist on type '{ error: string; success: string; }'.
  20 |         success: 'success message'
  21 |       }
> 22 |       console.log(message.what);
     |                           ^^^^
  23 |     }
  24 |   }
"""


def _invoke(*args: str):
    return runner.invoke(app, list(args))


def test_version() -> None:
    """Test --version flag shows version."""
    result = _invoke("--version")
    assert result.exit_code == 0
    assert "vue-type-check version" in result.stdout


def test_help() -> None:
    """Test --help lists the options."""
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "--root-dir" in result.stdout
    assert "--exclude-dir" in result.stdout


def test_root_dir_required() -> None:
    """Test a missing --root-dir is an error."""
    result = _invoke()
    assert result.exit_code == 1
    assert "--root-dir is required" in result.output


class TestCheckCommand:
    """End-to-end checks of the fixture project with the fake language server."""

    def test_reports_template_and_script_errors(self, project_dir: Path, fake_server_command: str) -> None:
        """Test code frames for template and script problems and exit code 1."""
        result = _invoke("--root-dir", str(project_dir), "--server-command", fake_server_command)
        assert result.exit_code == 1
        assert TEMPLATE_FRAME in result.stdout
        assert SCRIPT_FRAME in result.stdout

    def test_template_frame_printed_before_script_frame(
        self, project_dir: Path, fake_server_command: str
    ) -> None:
        """Test template diagnostics come before script diagnostics."""
        result = _invoke("--root-dir", str(project_dir), "--server-command", fake_server_command)
        assert result.stdout.index(TEMPLATE_FRAME) < result.stdout.index(SCRIPT_FRAME)

    def test_camel_case_flags(self, project_dir: Path, fake_server_command: str) -> None:
        """Test the camelCase flag spellings are accepted."""
        result = _invoke(
            "--rootDir", str(project_dir), "--onlyTypeScript", "--server-command", fake_server_command
        )
        assert result.exit_code == 1
        assert TEMPLATE_FRAME in result.stdout
        assert SCRIPT_FRAME in result.stdout

    def test_only_typescript_skips_javascript_components(
        self, project_dir: Path, fake_server_command: str
    ) -> None:
        """Test components with a plain JavaScript script are not checked."""
        default = _invoke("--root-dir", str(project_dir), "--server-command", fake_server_command)
        typed = _invoke(
            "--root-dir", str(project_dir), "--only-typescript", "--server-command", fake_server_command
        )
        assert "Plain.vue" in default.stdout
        assert "Plain.vue" not in typed.stdout
        assert typed.exit_code == 1

    def test_only_template_skips_script_errors(self, project_dir: Path, fake_server_command: str) -> None:
        """Test --only-template reports template problems only."""
        result = _invoke(
            "--root-dir", str(project_dir), "--only-template", "--server-command", fake_server_command
        )
        assert result.exit_code == 1
        assert TEMPLATE_FRAME in result.stdout
        assert "22:26" not in result.stdout

    def test_src_dir(self, project_dir: Path, fake_server_command: str) -> None:
        """Test --src-dir limits the files checked."""
        result = _invoke(
            "--root-dir", str(project_dir),
            "--src-dir", str(project_dir / "tests"),
            "--server-command", fake_server_command,
        )
        assert result.exit_code == 1
        assert "Broken.vue" in result.stdout
        assert "ComponentOne.vue" not in result.stdout

    def test_exclude_root(self, project_dir: Path) -> None:
        """Test excluding the root checks nothing and exits 0."""
        result = _invoke("--root-dir", str(project_dir), "--exclude-dir", str(project_dir))
        assert result.exit_code == 0
        assert "Error in" not in result.stdout

    def test_exclude_root_and_tests(self, project_dir: Path) -> None:
        """Test repeated exclusions covering everything exit 0 despite known errors."""
        result = _invoke(
            "--root-dir", str(project_dir),
            "--exclude-dir", str(project_dir),
            "--exclude-dir", str(project_dir / "tests"),
        )
        assert result.exit_code == 0
        assert "Error in" not in result.stdout

    def test_relative_exclude_dir(
        self, project_dir: Path, fake_server_command: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test relative exclusions resolve against the working directory."""
        monkeypatch.chdir(project_dir)
        result = _invoke(
            "--root-dir", ".",
            "--exclude-dir", "./src",
            "--server-command", fake_server_command,
        )
        assert result.exit_code == 1
        assert "Broken.vue" in result.stdout
        assert "ComponentOne.vue" not in result.stdout

    def test_clean_project_exits_zero(self, tmp_path: Path, fake_server_command: str) -> None:
        """Test a project without problems exits 0 and prints no frames."""
        (tmp_path / "Clean.vue").write_text("<template>\n  <p>ok</p>\n</template>\n")
        result = _invoke("--root-dir", str(tmp_path), "--server-command", fake_server_command)
        assert result.exit_code == 0
        assert "Error in" not in result.stdout

    def test_style_block_not_reported(self, tmp_path: Path, fake_server_command: str) -> None:
        """Test problems inside a style block do not fail the run."""
        (tmp_path / "Styled.vue").write_text(
            "<template><p>ok</p></template>\n\n<style>\n.property { color: red; }\n</style>\n"
        )
        result = _invoke("--root-dir", str(tmp_path), "--server-command", fake_server_command)
        assert result.exit_code == 0
        assert "Error in" not in result.stdout

    def test_server_failure_exits_one(
        self, project_dir: Path, fake_server_command: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a failing language server is reported and exits 1."""
        monkeypatch.setenv("FAKE_LS_MODE", "reject")
        result = _invoke("--root-dir", str(project_dir), "--server-command", fake_server_command)
        assert result.exit_code == 1
        assert "Cannot find tsconfig.json" in result.output

    def test_missing_server_exits_one(self, project_dir: Path) -> None:
        """Test a missing language server binary is fatal."""
        result = _invoke(
            "--root-dir", str(project_dir), "--server-command", "definitely-not-a-language-server"
        )
        assert result.exit_code == 1
        assert "Could not start language server" in result.output

    def test_verbose(self, project_dir: Path, fake_server_command: str) -> None:
        """Test --verbose prints the run summary."""
        result = _invoke(
            "--root-dir", str(project_dir), "--verbose", "--server-command", fake_server_command
        )
        assert "Checked 5 file(s), found 4 problem(s)" in result.output
