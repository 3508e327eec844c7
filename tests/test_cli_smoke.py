import os
import subprocess
import sys
from pathlib import Path

from kti.tool import build_parser, main

PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _cli(*args):
    repo = _repo_root()
    env = dict(os.environ)
    env["PYTHONPATH"] = str(repo) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "kti", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )


def test_help_exits_cleanly():
    proc = _cli("--help")
    assert proc.returncode == 0
    assert "file signatures" in (proc.stdout + proc.stderr)


def test_dry_run_subprocess_reports_and_changes_nothing(tmp_path):
    (tmp_path / "image.txt").write_bytes(PNG)
    proc = _cli(str(tmp_path), "--dry-run", "--config-dir", str(tmp_path / "cfg"))

    assert proc.returncode == 0, proc.stderr
    assert "Detected: png" in proc.stdout
    assert "Differences found: 1" in proc.stdout
    assert sorted(p.name for p in tmp_path.iterdir()) == ["image.txt"]


def test_main_renames_and_prints(tmp_path, capsys):
    (tmp_path / "image.txt").write_bytes(PNG)
    code = main([str(tmp_path), "--config-dir", str(tmp_path / "cfg")])

    out = capsys.readouterr().out
    assert code == 0
    assert (tmp_path / "image.png").exists()
    assert "Differences found: 1" in out


def test_main_single_file_silent(tmp_path, capsys):
    target = tmp_path / "clip.bin"
    target.write_bytes(b"fLaC\x00\x00\x00\x22")
    code = main(["--file", str(target), "-s", "--config-dir", str(tmp_path / "cfg")])

    assert code == 0
    assert (tmp_path / "clip.flac").exists()
    out = capsys.readouterr().out
    assert "Path:" not in out
    assert f"{target} -> {tmp_path / 'clip.flac'}" in out
    assert out.rstrip().endswith("Differences found: 1")


def test_main_missing_path_exits_with_error(tmp_path, capsys):
    code = main([str(tmp_path / "missing"), "--config-dir", str(tmp_path / "cfg")])
    assert code == 1
    assert "missing" in capsys.readouterr().err


def test_main_writes_log_file_only_when_asked(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "image.txt").write_bytes(PNG)
    log = tmp_path / "run.jsonl"

    code = main([str(data), "-n", "-s", "--log", str(log), "--json", "--config-dir", str(tmp_path / "cfg")])

    assert code == 0
    assert "DRY-RUN" in log.read_text(encoding="utf-8")
    assert sorted(p.name for p in data.iterdir()) == ["image.txt"]


def test_save_config_persists_options(tmp_path):
    cfg = tmp_path / "cfg"
    (tmp_path / "data").mkdir()
    code = main([str(tmp_path / "data"), "-n", "-s", "-m", "2", "--save-config", "--config-dir", str(cfg)])
    assert code == 0

    text = (cfg / "kti.json").read_text(encoding="utf-8")
    assert '"MAX_DEPTH": 2' in text
    assert "TARGET_PATH" not in text


def test_parser_leaves_unset_flags_as_none():
    args = build_parser().parse_args([])
    assert args.DRY_RUN is None
    assert args.MAX_DEPTH is None
    assert args.path is None


def test_saved_dry_run_does_not_stop_later_renames(tmp_path):
    cfg = tmp_path / "cfg"
    data = tmp_path / "data"
    data.mkdir()
    (data / "image.txt").write_bytes(PNG)

    assert main([str(data), "--dry-run", "--save-config", "--config-dir", str(cfg), "-s"]) == 0
    assert sorted(p.name for p in data.iterdir()) == ["image.txt"]
    assert "DRY_RUN" not in (cfg / "kti.json").read_text(encoding="utf-8")

    assert main([str(data), "--config-dir", str(cfg), "-s"]) == 0
    assert sorted(p.name for p in data.iterdir()) == ["image.png"]


def test_saved_switch_can_be_turned_off_again(tmp_path):
    cfg = tmp_path / "cfg"
    data = tmp_path / "data"
    data.mkdir()

    assert main([str(data), "-a", "-c", "--save-config", "--config-dir", str(cfg)]) == 0
    assert '"SHOW_HIDDEN": true' in (cfg / "kti.json").read_text(encoding="utf-8")

    assert main([str(data), "--no-show-hidden", "--no-color", "--save-config", "--config-dir", str(cfg)]) == 0
    text = (cfg / "kti.json").read_text(encoding="utf-8")
    assert '"SHOW_HIDDEN": false' in text
    assert '"COLOR": false' in text


def test_negated_switches_parse_to_false():
    args = build_parser().parse_args(["--no-silent", "--no-only-diff", "--no-follow-links", "--no-verbose", "--text"])
    assert args.SILENT is False
    assert args.ONLY_DIFFERENT is False
    assert args.FOLLOW_LINKS is False
    assert args.LOG_TO_CONSOLE is False
    assert args.LOG_FORMAT == "text"


def test_dot_is_a_short_alias_for_show_hidden():
    assert build_parser().parse_args(["-."]).SHOW_HIDDEN is True
    assert build_parser().parse_args(["-a"]).SHOW_HIDDEN is True
