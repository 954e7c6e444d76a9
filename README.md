# watchfilter

Filterers that decide whether a file-watcher event should pass or be dropped.
Each filterer has a `check_event(event, priority)` method that returns `True`
when the event passes.

- `watchfilter.globset.GlobsetFilterer`: a path-only filterer built from
  filter globs, ignore globs, ignore files and allowed file extensions.
- `watchfilter.ignore_filterer.IgnoreFilterer`: drops paths ignored by
  gitignore-style ignore files (`IgnoreFile`).
- `watchfilter.tagged.TaggedFilterer`: matches any event tag (path, file
  type, event kind, source, process, signal, process completion, priority)
  using a small filter language.

The package has no dependencies outside the standard library.

## What it does not do

It does not watch the filesystem, receive signals or run commands, and it has
no command-line tool. You build `Event` objects yourself (or from whatever
watcher you use) and ask a filterer whether they pass.

## Events

`watchfilter.events` holds the event types. An `Event` has a list of tags and
a `metadata` dict; `Event.paths()` yields `(path, file_type)` for its path
tags.

```python
from pathlib import Path
from watchfilter.events import Event, PathTag, FileType, Priority

event = Event(tags=[PathTag(Path("/project/src/main.py"), FileType.FILE)])
```

Tags: `PathTag(path, file_type)`, `FileEventKindTag(kind)` (a textual kind
such as `"Modify(Data(Content))"`), `SourceTag(Source.KEYBOARD)`,
`ProcessTag(pid)`, `SignalTag(Signal.INTERRUPT)` or
`SignalTag(CustomSignal(n))`, and `ProcessCompletionTag(end)`, where `end` is
a `ProcessEnd(kind, value)` or `None`.

## Globset filtering

```python
from watchfilter.globset import GlobsetFilterer

filterer = GlobsetFilterer(
    "/project",
    filters=[("*.py", None)],
    ignores=[("build/**", None)],
    ignore_files=[],
    extensions=["py", "toml"],
)
filterer.check_event(event, Priority.NORMAL)
```

Filters and ignores are `(glob, in_path)` pairs; an `in_path` of `None`
makes the glob global. Globs follow gitignore rules, relative to the origin.

- A path matching an ignore never passes.
- If filters are given, a path matching one passes. On POSIX systems a
  filter is also tried against the origin-relative path with a leading `/`,
  for compatibility with older watchexec behaviour (so `*/justfile` also
  admits `justfile` at the origin).
- If extensions are given (without the dot), files with one of them pass;
  directories and files without an extension do not.
- If neither filters nor extensions are given, any path not ignored passes.

An event passes when any of its paths passes. Events without paths always
pass. Paths rejected by the ignore files reject the whole event.

## Ignore files

```python
from watchfilter.ignore_filterer import IgnoreFile, IgnoreFilterer

ignores = IgnoreFilterer("/project", [IgnoreFile("/project/.gitignore")])
ignores.add_file(IgnoreFile("/project/src/.ignore", applies_in="/project/src"))
ignores.check_event(event, Priority.NORMAL)
```

Lines of a file with an `applies_in` directory are scoped to that directory.
The priority argument is not used. An unreadable file raises
`FilterIoError`.

## Tagged filters

Filters are written as `[!]{matcher}{op}{value}`:

```
path==/foo/bar
path*=**/bar
path~=bar$
!kind=file
source:=keyboard,mouse
complete*=error(*)
priority=normal
```

Matchers: `tag`, `path`, `type`, `kind`/`fek`, `source`/`src`,
`process`/`pid`, `signal`/`sig`, `complete`/`exit`, `priority`
(case-insensitive).

Operators: `==`/`!=` (exact, case-insensitive), `~=`/`~!` (regex search),
`*=`/`*!` (glob), `:=`/`:!` (set of comma-separated values), and `=`, which
means glob for `path`, `kind` and `complete`, and set otherwise. A value may
be wrapped in single or double quotes.

A leading `!` negates the filter gitignore-style: when it matches, the verdict
for its matcher becomes pass; when it does not match, it is ignored. Other
filters on the same matcher must all match.

Signals match by short name (`INT`), by name with `SIG` (`SIGINT`) or by
number (`2`). Process completions match against `_` (unknown), `success`,
`continued`, `error(N)`, `stop(N)`, `exception(HEX)` and `signal(NAME)`,
`signal(SIGNAME)` or `signal(N)`.

```python
from pathlib import Path
from watchfilter.parse import parse_filter
from watchfilter.tagged import TaggedFilterer

filterer = TaggedFilterer(Path("/project"), Path("/project"))
filterer.add_filters([parse_filter("path*=**/*.rs"), parse_filter("source!=mouse")])
filterer.check_event(event, Priority.NORMAL)
```

The origin and workdir must exist: they are resolved, and a missing one
raises `FilterIoError`. Path glob filters are compiled together with
gitignore rules against the origin; other path filters see the path relative
to the filter's `in_path`, else the workdir, else the origin. The filterer
also has `add_ignore_file(IgnoreFile)` and `clear_filters()`. Checking an
`URGENT` priority against priority filters raises `ValueError`.

`watchfilter.filter` holds `Filter`, `Matcher`, `Op` and the pattern types
(`ExactPattern`, `RegexPattern`, `GlobPattern`, `SetPattern`) for building
filters directly; `Filter.from_glob_ignore(in_path, glob)` makes a path
not-glob filter from a gitignore line.

## Filter files

Filter files hold one filter per line; blank lines and lines starting with
`#` are skipped. `watchfilter.files.FilterFile(IgnoreFile(path)).load()`
returns the parsed filters, each with the file's `applies_in` as `in_path`.
`watchfilter.files.discover_files_from_environment()` returns
`(filter_files, errors)`: every file named in `WATCHEXEC_FILTER_FILES`
(comma-separated), then the first existing one of
`$XDG_CONFIG_HOME/watchexec/filter`, `$APPDATA/watchexec/filter`,
`$USERPROFILE/.watchexec/filter` and `$HOME/.watchexec/filter`. Missing files
are skipped silently.

## Globs

`watchfilter.gitignore` has `GitignoreBuilder(root)`, whose `add_line` and
`build` produce a `Gitignore` with `matched` and `matched_path_or_any_parents`,
and `glob_match(pattern, subject)` for plain globs where `*` may cross `/`.

## Errors

Parsing errors raise `watchfilter.errors.ParseError`; bad globs raise
`watchfilter.errors.GlobError`; file problems raise
`watchfilter.errors.FilterIoError`. All derive from
`watchfilter.errors.FiltererError`.

## Installing

```
pip install .
```

The `test` extra installs pytest for the test suite in `tests/`.