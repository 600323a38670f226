"""Built-in Karabiner-Elements configuration used as the base for generated files.

The document mirrors what Karabiner-Elements writes to
``~/.config/karabiner/karabiner.json`` on a fresh install, extended with a
caps-lock "hyper key" rule and right-command+hjkl arrow navigation.
"""

from __future__ import annotations

from typing import Any

_FN_KEY_TARGETS: tuple[tuple[str, str, str], ...] = (
    ("f1", "consumer_key_code", "display_brightness_decrement"),
    ("f2", "consumer_key_code", "display_brightness_increment"),
    ("f3", "apple_vendor_keyboard_key_code", "mission_control"),
    ("f4", "apple_vendor_keyboard_key_code", "spotlight"),
    ("f5", "consumer_key_code", "dictation"),
    ("f6", "key_code", "f6"),
    ("f7", "consumer_key_code", "rewind"),
    ("f8", "consumer_key_code", "play_or_pause"),
    ("f9", "consumer_key_code", "fast_forward"),
    ("f10", "consumer_key_code", "mute"),
    ("f11", "consumer_key_code", "volume_decrement"),
    ("f12", "consumer_key_code", "volume_increment"),
)

_TARGET_FIELDS = ("apple_vendor_keyboard_key_code", "consumer_key_code", "key_code")

_ARROW_KEYS = (
    ("h", "left_arrow"),
    ("j", "down_arrow"),
    ("k", "up_arrow"),
    ("l", "right_arrow"),
)


def _complex_parameters() -> dict[str, Any]:
    return {
        "basic.simultaneous_threshold_milliseconds": 50,
        "basic.to_delayed_action_delay_milliseconds": 500,
        "basic.to_if_alone_timeout_milliseconds": 1000,
        "basic.to_if_held_down_threshold_milliseconds": 500,
        "mouse_motion_to_scroll.speed": 100,
    }


def _arrow_rule() -> dict[str, Any]:
    return {
        "description": "Change right_command+hjkl to arrow keys",
        "manipulators": [
            {
                "from": {
                    "key_code": source,
                    "modifiers": {
                        "mandatory": ["right_command"],
                        "optional": ["any"],
                    },
                },
                "to": [{"key_code": target}],
                "type": "basic",
            }
            for source, target in _ARROW_KEYS
        ],
    }


def _fn_function_keys(*, explicit_blanks: bool) -> list[dict[str, Any]]:
    """Function-key mappings; with ``explicit_blanks`` every target field is present."""
    keys = []
    for source, field, value in _FN_KEY_TARGETS:
        if explicit_blanks:
            target = {name: (value if name == field else "") for name in _TARGET_FIELDS}
        else:
            target = {field: value}
        keys.append({"from": {"key_code": source}, "to": [target]})
    return keys


def _virtual_hid_keyboard() -> dict[str, Any]:
    return {
        "country_code": 0,
        "indicate_sticky_modifier_keys_state": True,
        "mouse_key_xy_scale": 100,
    }


def _profile() -> dict[str, Any]:
    hyper_key_rule = {
        "manipulators": [
            {
                "description": "Change caps_lock to command+control+option+shift.",
                "from": {
                    "key_code": "caps_lock",
                    "modifiers": {"optional": ["any"]},
                },
                "to": [
                    {
                        "key_code": "left_shift",
                        "modifiers": ["left_command", "left_control", "left_option"],
                    }
                ],
                "type": "basic",
            }
        ]
    }
    return {
        "complex_modifications": {
            "parameters": _complex_parameters(),
            "rules": [hyper_key_rule, _arrow_rule()],
        },
        "devices": [],
        "fn_function_keys": _fn_function_keys(explicit_blanks=False),
        "name": "Default profile",
        "parameters": {"delay_milliseconds_before_open_device": 1000},
        "selected": True,
        "simple_modifications": [],
        "virtual_hid_keyboard": _virtual_hid_keyboard(),
    }


def default_document() -> dict[str, Any]:
    """Return a fresh copy of the default Karabiner configuration document."""
    caps_lock_rule = {
        "description": "",
        "manipulators": [
            {
                "from": {
                    "key_code": "caps_lock",
                    "modifiers": {"mandatory": None, "optional": ["any"]},
                },
                "to": [{"key_code": "left_shift"}],
                "type": "basic",
            }
        ],
    }
    return {
        "complex_modifications": {
            "parameters": _complex_parameters(),
            "rules": [_arrow_rule(), caps_lock_rule],
        },
        "devices": [],
        "fn_function_keys": _fn_function_keys(explicit_blanks=True),
        "global": {
            "check_for_updates_on_startup": True,
            "show_in_menu_bar": True,
            "show_profile_name_in_menu_bar": False,
        },
        "name": "Default profile",
        "parameters": {"delay_milliseconds_before_open_device": 1000},
        "profiles": [_profile()],
        "selected": True,
        "simple_modifications": [],
        "virtual_hid_keyboard": _virtual_hid_keyboard(),
    }