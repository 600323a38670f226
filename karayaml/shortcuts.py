"""Keyboard shortcuts kept in a YAML file and turned into Karabiner rules."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

import yaml
from tabulate import tabulate

from karayaml import karabiner
from karayaml.karabiner import (
    CAPS_LOCK_MODIFIER_KEYS,
    MANIPULATOR_TYPE_BASIC,
    ComplexMod,
    ComplexModRule,
    FromModifiers,
    KarabinerError,
    Manipulator,
    ManipulatorFrom,
    ManipulatorTo,
)

SHORTCUTS_FILE_NAME = "shortcuts.yaml"
DEFAULT_EDITOR = "code"

_log = logging.getLogger(__name__)


class ShortcutError(Exception):
    """Raised when shortcuts cannot be read, written or applied."""


def _text_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ShortcutError(f"{key}: expected a string, got {type(value).__name__}")
    return value


@dataclass
class FileOpenShortcut:
    """A hyper-key shortcut that opens an application or file."""

    key: str
    file: str

    @classmethod
    def from_dict(cls, data: Any) -> FileOpenShortcut:
        if not isinstance(data, dict):
            raise ShortcutError(f"shortcut entry: expected a mapping, got {type(data).__name__}")
        return cls(key=_text_field(data, "key"), file=_text_field(data, "file"))

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "file": self.file}


def shortcuts_file_path(home: str | Path | None = None) -> Path:
    """Return the location of the shortcuts file under ``home``."""
    if home is None:
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise ShortcutError(f"failed to get home dir: {exc}") from exc
    return Path(home) / ".karayaml" / SHORTCUTS_FILE_NAME


def _resolve(path: str | Path | None) -> Path:
    return Path(path) if path is not None else shortcuts_file_path()


def load(path: str | Path | None = None) -> list[FileOpenShortcut]:
    """Read the shortcuts listed in the YAML file."""
    target = _resolve(path)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ShortcutError(f"failed to read {target} file: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ShortcutError(f"failed to parse shortcuts file {target}: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ShortcutError(f"shortcuts file {target} must hold a list")
    return [FileOpenShortcut.from_dict(item) for item in data]


def write(shortcuts: Iterable[FileOpenShortcut], path: str | Path | None = None) -> Path:
    """Write the shortcuts to the YAML file, creating its directory if needed."""
    target = _resolve(path)
    try:
        target.parent.mkdir(exist_ok=True)
    except OSError as exc:
        raise ShortcutError(f"failed to create {target.parent} dir: {exc}") from exc
    text = yaml.safe_dump(
        [s.to_dict() for s in shortcuts],
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ShortcutError(f"failed to write {target} file: {exc}") from exc
    return target


def to_map(shortcuts: Iterable[FileOpenShortcut]) -> dict[str, FileOpenShortcut]:
    """Index shortcuts by key; a later entry for the same key wins."""
    return {s.key: s for s in shortcuts}


def find_blank(shortcuts: Iterable[FileOpenShortcut]) -> list[str]:
    """Return the keys whose shortcut has no file."""
    return [s.key for s in shortcuts if not s.file]


def build_rules(shortcuts: Iterable[FileOpenShortcut]) -> list[ComplexModRule]:
    """Build one Karabiner rule per distinct key."""
    return [
        ComplexModRule(
            description=f"open {s.file} app",
            manipulators=[
                Manipulator(
                    from_=ManipulatorFrom(
                        key_code=s.key,
                        modifiers=FromModifiers(mandatory=list(CAPS_LOCK_MODIFIER_KEYS)),
                    ),
                    to=[ManipulatorTo(shell_command=f"open -a '{s.file}'")],
                    type=MANIPULATOR_TYPE_BASIC,
                )
            ],
        )
        for s in to_map(shortcuts).values()
    ]


def save(shortcuts: Iterable[FileOpenShortcut], config_path: str | Path | None = None) -> Path:
    """Write the default Karabiner configuration extended with the shortcut rules."""
    try:
        config = karabiner.get_default()
        profile = config.default_profile()
        if profile.complex_mod is None:
            profile.complex_mod = ComplexMod()
        profile.complex_mod.rules.extend(build_rules(shortcuts))
        return config.save(config_path)
    except KarabinerError as exc:
        raise ShortcutError(f"failed to save config with shortcuts: {exc}") from exc


def add(
    key: str,
    file: str,
    shortcuts_path: str | Path | None = None,
    config_path: str | Path | None = None,
) -> Path:
    """Apply the existing shortcuts plus a new one to the Karabiner configuration."""
    current = load(shortcuts_path)
    current.append(FileOpenShortcut(key=key, file=file))
    return save(current, config_path)


def edit_yaml(path: str | Path | None = None, editor: str = DEFAULT_EDITOR) -> None:
    """Open the shortcuts file in ``editor`` until no shortcut is left without a file."""
    target = _resolve(path)
    while True:
        try:
            subprocess.run([editor, "--wait", str(target)], check=False)
        except OSError as exc:
            _log.debug("could not start editor %s: %s", editor, exc)
        blanks = find_blank(load(target))
        if not blanks:
            return
        _log.error(
            "fix [%s] keys which may have either empty or duplicate shortcut mappings",
            " ".join(blanks),
        )


def edit(
    shortcuts_path: str | Path | None = None,
    config_path: str | Path | None = None,
    editor: str = DEFAULT_EDITOR,
) -> Path:
    """Edit the shortcuts file, then apply it to the Karabiner configuration."""
    edit_yaml(shortcuts_path, editor)
    return save(load(shortcuts_path), config_path)


def list_shortcuts(path: str | Path | None = None) -> dict[str, FileOpenShortcut]:
    """Return the shortcuts in the file indexed by key."""
    return to_map(load(path))


def format_list(shortcuts: Mapping[str, FileOpenShortcut]) -> str:
    """Render shortcuts as a table sorted by key."""
    rows = [(s.key, s.file) for _, s in sorted(shortcuts.items())]
    return tabulate(rows, headers=["KEY", "APP PATH"], tablefmt="grid", disable_numparse=True)


def print_list(shortcuts: Mapping[str, FileOpenShortcut], stream: TextIO | None = None) -> None:
    """Print the shortcuts table surrounded by blank lines."""
    out = stream if stream is not None else sys.stdout
    out.write("\n" + format_list(shortcuts) + "\n\n")


def is_file_exists(path: str | Path) -> bool:
    """Tell whether ``path`` names an existing regular file."""
    return bool(path) and Path(path).is_file()


def is_dir_exists(path: str | Path) -> bool:
    """Tell whether ``path`` names an existing directory."""
    return bool(path) and Path(path).is_dir()