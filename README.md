# karayaml

A YAML-powered shortcut launcher for Karabiner-Elements on macOS.

You keep a list of keyboard shortcuts in `~/.karayaml/shortcuts.yaml`. Each
entry maps one key to an application. karayaml turns that list into Karabiner
rules and writes them to `~/.config/karabiner/karabiner.json`. Each rule fires
on the key held together with shift+control+option+command and runs
`open -a '<file>'`. The built-in configuration remaps caps lock to
shift+control+option+command, so caps lock plus the key opens the application.

The generated `karabiner.json` is always the built-in default configuration
plus the shortcut rules. Any existing `karabiner.json` is overwritten, not
merged.

## Installation

```
pip install .
```

## The shortcuts file

```yaml
- key: s
  file: Slack
- key: t
  file: Terminal
```

Each `file` value is passed to `open -a`, so it can be an application name or
a path. If a key appears more than once, the last entry for it wins.

## Commands

Write the built-in Karabiner configuration, with no shortcut rules. The
directory `~/.config/karabiner` must already exist:

```
karayaml init
```

Regenerate the Karabiner configuration from the shortcuts file plus one more
shortcut:

```
karayaml add --key s --file Slack
```

The key must be at most one character. The shortcuts file must already exist.
The new shortcut goes into `karabiner.json` only; it is not written back to
`shortcuts.yaml`, so the next `add` or `edit` leaves it out unless you also add
it to the file.

Edit the shortcuts file in your editor (`code --wait`), then regenerate the
Karabiner configuration. The editor is reopened for as long as any entry has an
empty `file`:

```
karayaml edit
```

Show the configured shortcuts as a table with the columns `KEY` and
`APP PATH`, sorted by key:

```
karayaml list
```

Print the version:

```
karayaml version
```

Add `--debug` (before or after the command name) for debug logging.

## Use from Python

- `karayaml.shortcuts`: `FileOpenShortcut`, `load`, `write`, `add`, `edit`,
  `list_shortcuts`, `format_list`, `print_list`, `build_rules`, `save` and
  `shortcuts_file_path`. The functions that touch files take optional path
  arguments, which default to the locations above. They raise `ShortcutError`.
- `karayaml.karabiner`: the configuration model (`Config`, `Profile` and the
  classes it is built from), `get_default`, `config_file_path` and `setup`.
  `setup` creates the configuration directory before it writes the built-in
  configuration. Errors are raised as `KarabinerError`.
- `karayaml.cli.main(argv=None)` runs the command line and returns the exit
  status.

## What it does not do

No command creates the shortcuts file. Write `~/.karayaml/shortcuts.yaml` by
hand, or call `karayaml.shortcuts.write`. There is no command to remove a
shortcut; edit the file with `karayaml edit` instead. The editor cannot be
changed from the command line.

## Tests

```
pip install .[test]
pytest
```