"""Karabiner-Elements configuration model and persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from karayaml.default_config import default_document

CONFIG_FILE_NAME = "karabiner.json"
CAPS_LOCK_MODIFIER_KEYS: tuple[str, ...] = (
    "left_shift",
    "left_control",
    "left_option",
    "left_command",
)
MANIPULATOR_TYPE_BASIC = "basic"

_log = logging.getLogger(__name__)


class KarabinerError(Exception):
    """Raised when the Karabiner configuration cannot be read, built or written."""


def _mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise KarabinerError(f"{what}: expected an object, got {type(data).__name__}")
    return data


def _scalar(data: dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return kind()
    if isinstance(value, bool) != (kind is bool) or not isinstance(value, kind):
        raise KarabinerError(
            f"{key}: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _strings(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise KarabinerError(f"{key}: expected a list of strings")
    return list(value)


def _nested(data: dict[str, Any], key: str, cls: Any) -> Any:
    value = data.get(key)
    return None if value is None else cls.from_dict(value)


def _nested_list(data: dict[str, Any], key: str, cls: Any) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise KarabinerError(f"{key}: expected a list, got {type(value).__name__}")
    return [cls.from_dict(item) for item in value]


def _dumps(document: Any) -> str:
    """Serialise compactly, escaping characters that are unsafe inside HTML."""
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    for char, escape in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escape)
    return text


def _home(home: str | Path | None) -> Path:
    if home is not None:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError as exc:
        raise KarabinerError(f"failed to get home dir: {exc}") from exc


@dataclass
class Global:
    check_for_updates_on_startup: bool = False
    show_in_menu_bar: bool = False
    show_profile_name_in_menu_bar: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Global:
        data = _mapping(data, "global")
        return cls(
            check_for_updates_on_startup=_scalar(data, "check_for_updates_on_startup", bool),
            show_in_menu_bar=_scalar(data, "show_in_menu_bar", bool),
            show_profile_name_in_menu_bar=_scalar(data, "show_profile_name_in_menu_bar", bool),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_for_updates_on_startup": self.check_for_updates_on_startup,
            "show_in_menu_bar": self.show_in_menu_bar,
            "show_profile_name_in_menu_bar": self.show_profile_name_in_menu_bar,
        }


@dataclass
class ProfileParameters:
    delay_milliseconds_before_open_device: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ProfileParameters:
        data = _mapping(data, "parameters")
        return cls(_scalar(data, "delay_milliseconds_before_open_device", int))

    def to_dict(self) -> dict[str, Any]:
        return {"delay_milliseconds_before_open_device": self.delay_milliseconds_before_open_device}


_COMPLEX_PARAMETER_KEYS = {
    "basic_simultaneous_threshold_milliseconds": "basic.simultaneous_threshold_milliseconds",
    "basic_to_delayed_action_delay_milliseconds": "basic.to_delayed_action_delay_milliseconds",
    "basic_to_if_alone_timeout_milliseconds": "basic.to_if_alone_timeout_milliseconds",
    "basic_to_if_held_down_threshold_milliseconds": "basic.to_if_held_down_threshold_milliseconds",
    "mouse_motion_to_scroll_speed": "mouse_motion_to_scroll.speed",
}


@dataclass
class ComplexModParameters:
    basic_simultaneous_threshold_milliseconds: int = 0
    basic_to_delayed_action_delay_milliseconds: int = 0
    basic_to_if_alone_timeout_milliseconds: int = 0
    basic_to_if_held_down_threshold_milliseconds: int = 0
    mouse_motion_to_scroll_speed: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ComplexModParameters:
        data = _mapping(data, "complex_modifications.parameters")
        return cls(**{attr: _scalar(data, key, int) for attr, key in _COMPLEX_PARAMETER_KEYS.items()})

    def to_dict(self) -> dict[str, Any]:
        return {
            key: getattr(self, attr)
            for attr, key in _COMPLEX_PARAMETER_KEYS.items()
            if getattr(self, attr)
        }


@dataclass
class VirtualHidKeyboard:
    country_code: int = 0
    indicate_sticky_modifier_keys_state: bool = False
    mouse_key_xy_scale: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> VirtualHidKeyboard:
        data = _mapping(data, "virtual_hid_keyboard")
        return cls(
            country_code=_scalar(data, "country_code", int),
            indicate_sticky_modifier_keys_state=_scalar(data, "indicate_sticky_modifier_keys_state", bool),
            mouse_key_xy_scale=_scalar(data, "mouse_key_xy_scale", int),
        )

    def to_dict(self) -> dict[str, Any]:
        items = (
            ("country_code", self.country_code),
            ("indicate_sticky_modifier_keys_state", self.indicate_sticky_modifier_keys_state),
            ("mouse_key_xy_scale", self.mouse_key_xy_scale),
        )
        return {key: value for key, value in items if value}


@dataclass
class FromModifiers:
    mandatory: list[str] = field(default_factory=list)
    optional: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> FromModifiers:
        data = _mapping(data, "modifiers")
        return cls(mandatory=_strings(data, "mandatory"), optional=_strings(data, "optional"))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.mandatory:
            out["mandatory"] = list(self.mandatory)
        if self.optional:
            out["optional"] = list(self.optional)
        return out


@dataclass
class ManipulatorFrom:
    key_code: str = ""
    modifiers: FromModifiers | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ManipulatorFrom:
        data = _mapping(data, "from")
        return cls(key_code=_scalar(data, "key_code", str), modifiers=_nested(data, "modifiers", FromModifiers))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.key_code:
            out["key_code"] = self.key_code
        if self.modifiers is not None:
            out["modifiers"] = self.modifiers.to_dict()
        return out


@dataclass
class ManipulatorTo:
    shell_command: str = ""
    key_code: str = ""
    modifiers: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ManipulatorTo:
        data = _mapping(data, "to")
        return cls(
            shell_command=_scalar(data, "shell_command", str),
            key_code=_scalar(data, "key_code", str),
            modifiers=_strings(data, "modifiers"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.shell_command:
            out["shell_command"] = self.shell_command
        if self.key_code:
            out["key_code"] = self.key_code
        if self.modifiers:
            out["modifiers"] = list(self.modifiers)
        return out


@dataclass
class Manipulator:
    description: str = ""
    from_: ManipulatorFrom | None = None
    to: list[ManipulatorTo] = field(default_factory=list)
    type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Manipulator:
        data = _mapping(data, "manipulator")
        return cls(
            description=_scalar(data, "description", str),
            from_=_nested(data, "from", ManipulatorFrom),
            to=_nested_list(data, "to", ManipulatorTo),
            type=_scalar(data, "type", str),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.description:
            out["description"] = self.description
        if self.from_ is not None:
            out["from"] = self.from_.to_dict()
        if self.to:
            out["to"] = [target.to_dict() for target in self.to]
        if self.type:
            out["type"] = self.type
        return out


@dataclass
class ComplexModRule:
    description: str = ""
    manipulators: list[Manipulator] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ComplexModRule:
        data = _mapping(data, "rule")
        return cls(
            description=_scalar(data, "description", str),
            manipulators=_nested_list(data, "manipulators", Manipulator),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.description:
            out["description"] = self.description
        if self.manipulators:
            out["manipulators"] = [m.to_dict() for m in self.manipulators]
        return out


@dataclass
class ComplexMod:
    parameters: ComplexModParameters | None = None
    rules: list[ComplexModRule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ComplexMod:
        data = _mapping(data, "complex_modifications")
        return cls(
            parameters=_nested(data, "parameters", ComplexModParameters),
            rules=_nested_list(data, "rules", ComplexModRule),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.parameters is not None:
            out["parameters"] = self.parameters.to_dict()
        if self.rules:
            out["rules"] = [rule.to_dict() for rule in self.rules]
        return out


@dataclass
class FnFunctionKeyFrom:
    key_code: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> FnFunctionKeyFrom:
        return cls(_scalar(_mapping(data, "from"), "key_code", str))

    def to_dict(self) -> dict[str, Any]:
        return {"key_code": self.key_code} if self.key_code else {}


@dataclass
class FnFunctionKeyTo:
    key_code: str = ""
    consumer_key_code: str = ""
    apple_vendor_keyboard_key_code: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> FnFunctionKeyTo:
        data = _mapping(data, "to")
        return cls(
            key_code=_scalar(data, "key_code", str),
            consumer_key_code=_scalar(data, "consumer_key_code", str),
            apple_vendor_keyboard_key_code=_scalar(data, "apple_vendor_keyboard_key_code", str),
        )

    def to_dict(self) -> dict[str, Any]:
        items = (
            ("key_code", self.key_code),
            ("consumer_key_code", self.consumer_key_code),
            ("apple_vendor_keyboard_key_code", self.apple_vendor_keyboard_key_code),
        )
        return {key: value for key, value in items if value}


@dataclass
class FnFunctionKeys:
    from_: FnFunctionKeyFrom | None = None
    to: list[FnFunctionKeyTo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> FnFunctionKeys:
        data = _mapping(data, "fn_function_keys")
        return cls(from_=_nested(data, "from", FnFunctionKeyFrom), to=_nested_list(data, "to", FnFunctionKeyTo))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_ is not None:
            out["from"] = self.from_.to_dict()
        if self.to:
            out["to"] = [target.to_dict() for target in self.to]
        return out


@dataclass
class Profile:
    name: str = ""
    selected: bool = False
    parameters: ProfileParameters | None = None
    complex_mod: ComplexMod | None = None
    simple_modifications: list[Any] | None = None
    fn_function_keys: list[FnFunctionKeys] = field(default_factory=list)
    virtual_hid_keyboard: VirtualHidKeyboard | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Profile:
        data = _mapping(data, "profile")
        simple = data.get("simple_modifications")
        if simple is not None and not isinstance(simple, list):
            raise KarabinerError("simple_modifications: expected a list")
        return cls(
            name=_scalar(data, "name", str),
            selected=_scalar(data, "selected", bool),
            parameters=_nested(data, "parameters", ProfileParameters),
            complex_mod=_nested(data, "complex_modifications", ComplexMod),
            simple_modifications=None if simple is None else list(simple),
            fn_function_keys=_nested_list(data, "fn_function_keys", FnFunctionKeys),
            virtual_hid_keyboard=_nested(data, "virtual_hid_keyboard", VirtualHidKeyboard),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.selected:
            out["selected"] = True
        if self.parameters is not None:
            out["parameters"] = self.parameters.to_dict()
        if self.complex_mod is not None:
            out["complex_modifications"] = self.complex_mod.to_dict()
        out["simple_modifications"] = (
            None if self.simple_modifications is None else list(self.simple_modifications)
        )
        if self.fn_function_keys:
            out["fn_function_keys"] = [keys.to_dict() for keys in self.fn_function_keys]
        if self.virtual_hid_keyboard is not None:
            out["virtual_hid_keyboard"] = self.virtual_hid_keyboard.to_dict()
        return out


@dataclass
class Config:
    global_: Global | None = None
    profiles: list[Profile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        data = _mapping(data, "config")
        return cls(global_=_nested(data, "global", Global), profiles=_nested_list(data, "profiles", Profile))

    def to_dict(self) -> dict[str, Any]:
        return {
            "global": None if self.global_ is None else self.global_.to_dict(),
            "profiles": [profile.to_dict() for profile in self.profiles],
        }

    def to_json(self) -> str:
        """Return the compact JSON text written to the configuration file."""
        return _dumps(self.to_dict())

    def default_profile(self) -> Profile:
        """Return the first profile."""
        if not self.profiles:
            raise KarabinerError("no profile found")
        return self.profiles[0]

    def save(self, path: str | Path | None = None) -> Path:
        """Write the configuration to ``path`` (the user's karabiner.json by default)."""
        target = Path(path) if path is not None else config_file_path()
        try:
            target.write_text(self.to_json(), encoding="utf-8")
        except OSError as exc:
            raise KarabinerError(f"failed to write {target} file: {exc}") from exc
        return target


def config_file_path(home: str | Path | None = None) -> Path:
    """Return the location of karabiner.json under ``home``."""
    return _home(home) / ".config" / "karabiner" / CONFIG_FILE_NAME


def get_default() -> Config:
    """Return the built-in default configuration."""
    return Config.from_dict(default_document())


def setup(path: str | Path | None = None) -> Path:
    """Create the configuration directory and write the default configuration."""
    target = Path(path) if path is not None else config_file_path()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise KarabinerError(f"failed to ensure {target.parent} dir: {exc}") from exc
    get_default().save(target)
    _log.info("karabiner config file %s created", target)
    return target