import io
import json

import pytest

from karayaml.cli import VERSION_LABEL, build_parser, main, report_error
from karayaml.karabiner import Config, config_file_path, get_default
from karayaml.shortcuts import FileOpenShortcut, shortcuts_file_path, write


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_version_prints_label(capsys):
    assert main(["version"]) == 0
    assert capsys.readouterr().out == "dev\n"
    assert VERSION_LABEL == "dev"


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: karayaml" in capsys.readouterr().out


def test_parser_reads_add_flags():
    args = build_parser().parse_args(["add", "--key", "s", "--file", "Safari", "--debug"])
    assert (args.command, args.key, args.file, args.debug) == ("add", "s", "Safari", True)


def test_debug_before_command_is_kept():
    args = build_parser().parse_args(["--debug", "list"])
    assert args.debug is True


def test_add_rejects_long_key(home):
    assert main(["add", "--key", "ab", "--file", "Safari"]) == 1
    assert not config_file_path(home).exists()


def test_add_writes_rule(home):
    write([], shortcuts_file_path(home))
    config_file_path(home).parent.mkdir(parents=True)
    assert main(["add", "--key", "s", "--file", "Safari"]) == 0
    config = Config.from_dict(json.loads(config_file_path(home).read_text(encoding="utf-8")))
    last = config.default_profile().complex_mod.rules[-1]
    assert last.manipulators[0].to[0].shell_command == "open -a 'Safari'"


def test_init_writes_default_config(home):
    config_file_path(home).parent.mkdir(parents=True)
    assert main(["init"]) == 0
    written = json.loads(config_file_path(home).read_text(encoding="utf-8"))
    assert Config.from_dict(written) == get_default()


def test_init_fails_without_config_dir(home):
    assert main(["init"]) == 1


def test_list_prints_table(home, capsys):
    write([FileOpenShortcut("s", "Safari")], shortcuts_file_path(home))
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "APP PATH" in out
    assert "Safari" in out


def test_list_without_file_fails(home):
    assert main(["list"]) == 1


def test_report_error_includes_details():
    out = io.StringIO()
    report_error("boom", out)
    text = out.getvalue()
    assert text.startswith("=" * 80 + "\n")
    assert "The KaraYaml CLI encountered an unexpected error." in text
    assert text.endswith("Error Details:     boom\n\n")