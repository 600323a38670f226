import io
import json
from unittest.mock import patch

import pytest

from karayaml.karabiner import CAPS_LOCK_MODIFIER_KEYS, Config, get_default
from karayaml.shortcuts import (
    FileOpenShortcut,
    ShortcutError,
    add,
    build_rules,
    edit,
    edit_yaml,
    find_blank,
    format_list,
    is_dir_exists,
    is_file_exists,
    list_shortcuts,
    load,
    print_list,
    save,
    shortcuts_file_path,
    to_map,
    write,
)

DEFAULT_RULE_COUNT = len(get_default().default_profile().complex_mod.rules)


@pytest.fixture
def shortcuts_path(tmp_path):
    return tmp_path / ".karayaml" / "shortcuts.yaml"


def _profile_rules(config_path):
    config = Config.from_dict(json.loads(config_path.read_text(encoding="utf-8")))
    return config.default_profile().complex_mod.rules


def test_write_and_load_round_trip(shortcuts_path):
    items = [FileOpenShortcut("s", "Safari"), FileOpenShortcut("1", "Notes")]
    write(items, shortcuts_path)
    assert load(shortcuts_path) == items


def test_write_sorts_fields(shortcuts_path):
    write([FileOpenShortcut("s", "Safari")], shortcuts_path)
    assert shortcuts_path.read_text(encoding="utf-8") == "- file: Safari\n  key: s\n"


def test_load_missing_file_fails(tmp_path):
    with pytest.raises(ShortcutError):
        load(tmp_path / "absent.yaml")


def test_load_empty_file_gives_no_shortcuts(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load(path) == []


def test_load_rejects_non_string_key(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- key: 1\n  file: Notes\n", encoding="utf-8")
    with pytest.raises(ShortcutError):
        load(path)


def test_to_map_keeps_last_entry_per_key():
    mapped = to_map([FileOpenShortcut("a", "One"), FileOpenShortcut("a", "Two")])
    assert list(mapped) == ["a"]
    assert mapped["a"].file == "Two"


def test_find_blank():
    items = [FileOpenShortcut("a", ""), FileOpenShortcut("b", "B"), FileOpenShortcut("c", "")]
    assert find_blank(items) == ["a", "c"]


def test_build_rules_uses_hyper_key():
    (rule,) = build_rules([FileOpenShortcut("s", "Safari")])
    manipulator = rule.manipulators[0]
    assert rule.description == "open Safari app"
    assert manipulator.from_.key_code == "s"
    assert manipulator.from_.modifiers.mandatory == list(CAPS_LOCK_MODIFIER_KEYS)
    assert manipulator.to[0].shell_command == "open -a 'Safari'"
    assert manipulator.type == "basic"


def test_save_appends_rules_to_default_profile(tmp_path):
    config_path = tmp_path / "karabiner.json"
    save([FileOpenShortcut("s", "Safari"), FileOpenShortcut("n", "Notes")], config_path)
    rules = _profile_rules(config_path)
    assert len(rules) == DEFAULT_RULE_COUNT + 2
    assert {r.description for r in rules[DEFAULT_RULE_COUNT:]} == {"open Safari app", "open Notes app"}


def test_save_into_missing_directory_fails(tmp_path):
    with pytest.raises(ShortcutError):
        save([], tmp_path / "missing" / "karabiner.json")


def test_add_keeps_yaml_and_updates_config(tmp_path, shortcuts_path):
    write([FileOpenShortcut("s", "Safari")], shortcuts_path)
    before = shortcuts_path.read_text(encoding="utf-8")
    config_path = tmp_path / "karabiner.json"
    add("n", "Notes", shortcuts_path, config_path)
    keys = [r.manipulators[0].from_.key_code for r in _profile_rules(config_path)[DEFAULT_RULE_COUNT:]]
    assert keys == ["s", "n"]
    assert shortcuts_path.read_text(encoding="utf-8") == before


def test_edit_yaml_reopens_until_no_blank(shortcuts_path):
    write([FileOpenShortcut("a", "")], shortcuts_path)
    calls = []

    def fake_run(cmd, check=False):
        calls.append(cmd)
        if len(calls) == 2:
            write([FileOpenShortcut("a", "Notes")], shortcuts_path)

    with patch("karayaml.shortcuts.subprocess.run", side_effect=fake_run):
        edit_yaml(shortcuts_path, editor="myeditor")
    assert calls == [["myeditor", "--wait", str(shortcuts_path)]] * 2


def test_edit_yaml_ignores_missing_editor(tmp_path, shortcuts_path):
    items = [FileOpenShortcut("a", "Notes")]
    write(items, shortcuts_path)
    edit_yaml(shortcuts_path, editor=str(tmp_path / "no-such-editor"))
    assert load(shortcuts_path) == items


def test_edit_applies_shortcuts(tmp_path, shortcuts_path):
    write([FileOpenShortcut("m", "Mail")], shortcuts_path)
    config_path = tmp_path / "karabiner.json"
    with patch("karayaml.shortcuts.subprocess.run") as run:
        edit(shortcuts_path, config_path, editor="myeditor")
    assert run.call_count == 1
    assert _profile_rules(config_path)[-1].description == "open Mail app"


def test_list_shortcuts(shortcuts_path):
    write([FileOpenShortcut("b", "B"), FileOpenShortcut("a", "A")], shortcuts_path)
    assert list_shortcuts(shortcuts_path) == {"b": FileOpenShortcut("b", "B"), "a": FileOpenShortcut("a", "A")}


def test_format_list_sorted_by_key():
    table = format_list({"b": FileOpenShortcut("b", "Beta"), "a": FileOpenShortcut("a", "Alpha")})
    assert "KEY" in table and "APP PATH" in table
    assert table.index("Alpha") < table.index("Beta")


def test_print_list_surrounds_table_with_blank_lines():
    mapping = {"a": FileOpenShortcut("a", "Alpha")}
    out = io.StringIO()
    print_list(mapping, out)
    assert out.getvalue() == "\n" + format_list(mapping) + "\n\n"


def test_existence_checks(tmp_path):
    file_path = tmp_path / "f.txt"
    file_path.write_text("x", encoding="utf-8")
    assert is_file_exists(file_path) is True
    assert is_file_exists(tmp_path) is False
    assert is_file_exists("") is False
    assert is_dir_exists(tmp_path) is True
    assert is_dir_exists(file_path) is False
    assert is_dir_exists(tmp_path / "absent") is False


def test_shortcuts_file_path(tmp_path):
    assert shortcuts_file_path(tmp_path) == tmp_path / ".karayaml" / "shortcuts.yaml"