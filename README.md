# pulith

`pulith` is a library of building blocks for working with the native package
managers of a system (apt, dnf, pacman, zypper, apk, brew, winget, scoop and
choco).

## Modules

- `pulith.ver`: version parsing. `parse_version` tries three forms in order.
  It first tries a calendar version (`CalVer`, such as `2024-05-01`). Next it
  tries a strict semantic version (`SemVer`, such as `1.2.3-rc.1`). Last it tries
  a lenient `Partial` version (such as `18 lts`), whose parts are kept as text.
  Versions of all three kinds compare with one another. A failed parse raises
  `VersionError` or one of its subclasses.
- `pulith.package`: package descriptors. `parse_descriptor` reads one string
  and returns one of three things:
  - a list index, from input such as `3`;
  - a `BackendType`, from input such as `@brew`;
  - a `Package`, from input such as `@winget:ripgrep:14.1.0` or `ripgrep`.

  A `Package` has `name` and `id` properties. `format_descriptor` turns a
  descriptor back into text. Errors derive from `DescriptorError`.
- `pulith.backend`: `BackendType`, and `which_pm`, which picks the native package
  manager for an `OS` (the host by default). It also has `Metadata`, `Snap`, the
  abstract `Backend`, and `Winget`. `Winget.locate` finds the executable.
  `Winget.add_command` builds the install command line and `Winget.add` runs it.
- `pulith.env`: system detection. It provides `system_os`, `system_arch`,
  `which_shell` and `path_entries`. `local_shell` starts the user's shell with
  extra environment variables and waits for it to exit.
- `pulith.alias`: `CommandTemplate.parse` reads templates such as
  `install {0} {--version -v}`. `build_parser` builds an `argparse` parser for the
  template, and `expand` fills the template from the parsed arguments.
- `pulith.flag`: per-command flag configuration, loaded from plain dictionaries.
  It provides `FlagConfig`, `FlagResolve`, `FlagValue`, `ArgPat`, `FlagName` and
  `FlagPolicy`.
- `pulith.profile`: `FrameApi` reads files under `<root>/pulith`:
  - `config` is the TOML configuration;
  - `profile` is a Jinja template, rendered with the TOML files in `data/` and
    parsed as TOML;
  - `script/` holds the scripts.

  From these it reports script commands and command aliases.
- `pulith.client`: HTTP downloads through `httpx`, optionally through proxies
  (`ClientSetting`). `fetch` streams a response, and `FileDownload.fetch_raw`
  writes the response body to a file.
- `pulith.tracker`: `ProgressTrackerBuilder` and `ProgressTracker`, a `tqdm`
  progress bar for byte counts.
- `pulith.table`: `Formatter` renders dataclasses, named tuples or mappings as a
  plain table, with an optional header and footer line.
- `pulith.registry`: two kinds of persistent storage.
  - `RegLoader` is a JSON registry file with a content hash. It is written
    atomically on `save` or on leaving its `with` block, and it raises
    `HashMismatchError` if the file was changed elsewhere.
  - `KeyValueCache` is a SQLite-backed key-value store.
- `pulith.inventory`: `Inventory`, a SQLite store of backend snapshots (`Snap`)
  and installed tools (`ToolStatus`), with the key helpers `bk_snap_key`,
  `tool_key` and `tool_key_prefix`.
- `pulith.paths`: `PulithEnv.from_environment` reads the home directory, the
  working directory and the store layout (`Store`). The store is under
  `~/.pulith`, or under the directory given in `PULITH_ROOT`.

## Installation

```
pip install .
```

Install the test extra to run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from pulith.ver import parse_version
from pulith.package import Package, parse_descriptor

print(parse_version("2024-05-01"))   # 2024-05-01

descriptor = parse_descriptor("ripgrep:14.1.0")
if isinstance(descriptor, Package):
    print(descriptor.name, descriptor.id, descriptor.ver)   # ripgrep unknown.ripgrep 14.1.0
```

## What it does not do

- There is no command-line program. The package is a library only.
- `Winget` is the only backend that can install anything. The other
  `BackendType` values name package managers but have no implementation.
- There are no remove, update, list or search operations.