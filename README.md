# vidlang

vidlang is a small scripting language for describing video edits as
pipelines of commands. The package has a lexer (`vidlang.lexer`), a parser
that builds a syntax tree (`vidlang.parser`, `vidlang.nodes`), a tree
printer (`vidlang.treeprint`), an interpreter for the `open` and `export`
commands (`vidlang.interpreter`, `vidlang.commands`, `vidlang.runtime`),
and a small HTTP server that serves a video file and tells connected
browsers when it changes (`vidlang.server`).

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## A first script

```
# edit.vl
clip := open "input.mp4"
export clip "output.mp4"
```

The parser begins one item into the text, so the very first token of a
script is not parsed. Start every script with a comment or a blank line,
as above.

## Language overview

- Comments start with `#` and run to the end of the line.
- Values are numbers (`3`, `1.5`), double-quoted strings
  (`"file.mp4"`), identifiers, and lists (`[a, b, c]`).
- `name := value` declares a variable; `name = value` assigns one.
- `value |> command args |> command args` feeds a value through a
  pipeline of commands. A pipe may start a new line.
- `[x, y](body)` is a sub-expression with parameters `x` and `y`.
- `stream` names the stream produced by the most recent top-level
  expression.
- Arithmetic with `+`, `-`, `*`, `/` and parentheses may appear in
  command arguments; it is parsed but not evaluated.

The lexer knows the commands `brightness`, `concat`, `contrast`,
`crossfade`, `cut`, `export`, `fade`, `hue`, `map`, `open`, `pitch`,
`saturation`, `speed`, `trackline` and `volume`. The interpreter runs
only two of them:

- `open "file"` checks that the file exists and returns a stream for it.
- `export source "output"` takes a stream variable (or `stream`) and an
  output name given as a string or a string variable, and records an
  export job. Any other command raises an "unknown command" error.

## What the package does not do

The interpreter does not decode, edit or encode video. An `export`
produces an `ExportJob` (the source file, the output name and an
overwrite flag); it is appended to the context's `exports` list and, if
an exporter callable was supplied, handed to it. Writing the output file
is left to that callable.

## Command-line tools

Print the syntax tree of a script:

```
vidlang-parse --script edit.vl
cat edit.vl | vidlang-parse --stdin
```

Run a script and list the exports it asked for:

```
vidlang-run --script edit.vl
vidlang-run --stdin --debug < edit.vl
```

Each export is printed as `Export: input.mp4 -> output.mp4 (overwrite)`.
With `--debug`, opened files and export jobs are also printed. Options
may be written with one dash or two (`-script`, `--script`). When reading
from standard input only complete lines are used. Errors are reported on
standard error and the command exits with status 1.

Serve a video file:

```
vidlang-server
vidlang-server --video ./video.mp4 --port 8080 --static ./static
```

The server listens on port 8080 by default and serves:

- `/video`: the file (default `./video.mp4`) as `video/mp4`, with an
  `ETag` built from its modification time, `304 Not Modified` for a
  matching `If-None-Match`, and single byte-range requests.
- `/events`: a Server-Sent Events stream that sends
  `event: version` with the current tag, then a new one each time the
  file changes. The file is checked every half second.
- `/`: `index.html` from the `--static` directory, and files under
  `/static/` from that directory. Without `--static`, `/` answers 500
  and other paths 404.

## Library use

```python
from vidlang.parser import parse
from vidlang.treeprint import format_tree

for node in parse('# edit\nclip := open "input.mp4"\n'):
    print(format_tree(node, ""))
```

```python
from vidlang.interpreter import interpret

def run_export(job):
    print("would write", job.output, "from", job.stream.source)

ctx = interpret('# edit\nclip := open "input.mp4"\nexport clip "out.mp4"\n',
                debug=False, exporter=run_export)
print(ctx.exports)
```

`interpret` returns the `Context` it used, holding the variables, the
current stream and the recorded export jobs. An exception raised by the
exporter is re-raised as an `InterpreterError` beginning "export failed".

Parse errors are raised as `vidlang.nodes.AstError`, carrying the line
and position (both counted from zero) of the offending token; internal
parser invariants raise `vidlang.parser.AssertionFailure`; run-time
errors are raised as `vidlang.runtime.InterpreterError`.