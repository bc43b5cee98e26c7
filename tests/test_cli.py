"""Tests for the uyamlt command line."""

import os
from unittest.mock import patch

import pytest

from uyamlt.__main__ import build_parser, forwarded_arguments, main
from uyamlt.config import Settings
from uyamlt.core.installation import get_merge_tool_path

from conftest import make_editor, make_project


@pytest.fixture
def hub(editor_dir, env, linux, no_vcs, tmp_path, monkeypatch):
    """Two installed editors and a working directory outside any project."""
    old = make_editor(editor_dir, "2021.3.5f1")
    new = make_editor(editor_dir, "2022.3.11f1")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return {"old": old, "new": new, "workdir": workdir}


class TestParser:
    """Tests for argument parsing."""

    def test_merge_arguments(self):
        args = build_parser().parse_args(
            ["merge", "-p", "Game", "--fallback", "none", "B", "R", "L", "M"]
        )
        assert str(args.project) == "Game"
        assert args.fallback == "none"
        assert forwarded_arguments(args) == ["merge", "-p", "B", "R", "L", "M"]

    def test_exec_arguments(self):
        args = build_parser().parse_args(["exec", "--", "extract", "-x", "file"])
        assert forwarded_arguments(args) == ["extract", "-x", "file"]

    def test_invalid_fallback(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["merge", "--fallback", "sometimes", "a", "b", "c", "d"])
        assert exc_info.value.code == 2

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestSettings:
    """Tests for environment settings."""

    @pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("0", False), ("", False)])
    def test_dry_run(self, value, expected):
        assert Settings.from_environ({"UYAMLT_DRY_RUN": value}).dry_run is expected

    def test_editor_dirs(self, tmp_path):
        environ = {"UYAMLT_EDITOR_DIR": f"{tmp_path / 'a'}{os.pathsep}{tmp_path / 'b'}"}
        assert Settings.from_environ(environ).editor_dirs == [tmp_path / "a", tmp_path / "b"]

    def test_log_level(self):
        assert Settings.from_environ({"UYAMLT_LOG_LEVEL": "debug"}).log_level == 10
        assert Settings.from_environ({"UYAMLT_LOG_LEVEL": "bogus"}).log_level is None


class TestMain:
    """End-to-end tests of main() against a fake Hub."""

    def test_dry_run_latest(self, hub, env, capsys):
        """Test dry run outside a project reports the newest merge tool."""
        env.setenv("UYAMLT_DRY_RUN", "1")
        with patch("uyamlt.core.invoker.subprocess.Popen") as mock_popen:
            code = main(["merge", "base", "remote", "local", "merged"])

        assert code == 0
        mock_popen.assert_not_called()
        out = capsys.readouterr().out
        assert f"executable: {hub['new'].resolve()}" in out
        assert "arguments: merge -p base remote local merged" in out

    def test_runs_project_version(self, hub, tmp_path):
        """Test the project's editor is run and its exit code returned."""
        project = make_project(tmp_path / "Game", "2021.3.5f1")
        with patch("uyamlt.core.invoker.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 1
            code = main(["merge", "-p", str(project), "b", "r", "l", "m"])

        assert code == 1
        argv = mock_popen.call_args[0][0]
        assert argv == [str(hub["old"].resolve()), "merge", "-p", "b", "r", "l", "m"]

    def test_dry_run_matches_real_run(self, hub, env, capsys):
        with patch("uyamlt.core.invoker.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 0
            main(["exec", "--", "extract", "in.prefab"])
        real_argv = mock_popen.call_args[0][0]

        env.setenv("UYAMLT_DRY_RUN", "true")
        main(["exec", "--", "extract", "in.prefab"])
        out = capsys.readouterr().out

        assert f"executable: {real_argv[0]}" in out
        assert "arguments: extract in.prefab" in out

    def test_project_detected_from_cwd(self, hub, tmp_path, monkeypatch, capsys):
        project = make_project(tmp_path / "Game", "2021.3.5f1")
        monkeypatch.chdir(project)
        assert main(["which"]) == 0
        assert capsys.readouterr().out.strip() == str(hub["old"].resolve())

    def test_force(self, hub, tmp_path, capsys):
        project = make_project(tmp_path / "Game", "2021.3.5f1")
        assert main(["which", "-p", str(project), "--force"]) == 0
        assert capsys.readouterr().out.strip() == str(hub["new"].resolve())

    def test_missing_version_no_fallback(self, hub, tmp_path, capsys):
        project = make_project(tmp_path / "Game", "2019.4.40f1")
        code = main(["merge", "-p", str(project), "--fallback", "none", "b", "r", "l", "m"])
        assert code == 1
        err = capsys.readouterr().err
        assert "uyamlt: error:" in err
        assert "2019.4.40f1" in err

    def test_no_installations(self, editor_dir, env, linux, no_vcs, capsys):
        with patch("uyamlt.core.invoker.subprocess.Popen") as mock_popen:
            code = main(["merge", "b", "r", "l", "m"])
        assert code == 1
        mock_popen.assert_not_called()
        assert "Could not find any Unity installations" in capsys.readouterr().err

    def test_merge_needs_four_files(self, hub, capsys):
        """Test too few merge files is a usage error (exit 2)."""
        with patch("uyamlt.core.invoker.subprocess.Popen") as mock_popen:
            with pytest.raises(SystemExit) as exc_info:
                main(["merge", "b", "r"])
        assert exc_info.value.code == 2
        mock_popen.assert_not_called()
        assert "BASE, REMOTE, LOCAL and MERGED" in capsys.readouterr().err

    def test_unreadable_editor_does_not_abort(self, hub, capsys):
        """Test an editor that cannot be inspected is skipped, not fatal."""
        real_get_merge_tool_path = get_merge_tool_path

        def denied_for_newest(os_type, editor_path):
            if editor_path.name == "2022.3.11f1":
                raise PermissionError(13, "Permission denied", str(editor_path))
            return real_get_merge_tool_path(os_type, editor_path)

        with patch(
            "uyamlt.core.installation.get_merge_tool_path",
            side_effect=denied_for_newest,
        ):
            assert main(["which"]) == 0
        assert capsys.readouterr().out.strip() == str(hub["old"].resolve())

    def test_list(self, hub, tmp_path, capsys):
        project = make_project(tmp_path / "Game", "2021.3.5f1")
        assert main(["list", "-p", str(project)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("  2022.3.11f1")
        assert lines[1].startswith("* 2021.3.5f1")

    def test_verbose_logs_to_stderr(self, hub, env, capsys):
        env.setenv("UYAMLT_DRY_RUN", "1")
        main(["-v", "merge", "b", "r", "l", "m"])
        captured = capsys.readouterr()
        assert "Installation detected" in captured.err
        assert "Installation detected" not in captured.out

    def test_debug_logging_runs_no_extra_commands(self, hub, env, capsys):
        """Test -vv only logs what detection found, without querying git or p4."""
        env.setenv("UYAMLT_DRY_RUN", "1")
        with patch("uyamlt.utils.vcs_detector.subprocess.run") as mock_run:
            assert main(["-vv", "merge", "b", "r", "l", "m"]) == 0
        mock_run.assert_not_called()
        assert "[DEBUG]" in capsys.readouterr().err

    def test_merge_help_points_to_exec(self, capsys):
        with pytest.raises(SystemExit):
            main(["merge", "--help"])
        help_text = " ".join(capsys.readouterr().out.split())
        assert "exec -- merge -p" in help_text
