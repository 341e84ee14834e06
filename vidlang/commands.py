"""Built-in commands that scripts may call."""

from __future__ import annotations

import os
from typing import Any, Callable, Optional, Sequence

from .nodes import Ident, LiteralString
from .runtime import Context, ExportJob, InterpreterError, Stream, StreamType, ValueKind

Handler = Callable[[Context, Optional[Stream], Sequence[Any]], Stream]


def _unquote(text: str) -> str:
    return text.strip('"')


def cmd_open(ctx: Context, stream: Optional[Stream], args: Sequence[Any]) -> Stream:
    """Open a media file and return it as a stream."""
    if len(args) != 1:
        raise InterpreterError("open command requires exactly one argument")
    arg = args[0]
    if not isinstance(arg, LiteralString):
        raise InterpreterError("open command requires a string argument")
    filename = _unquote(arg.value)
    if not os.path.exists(filename):
        raise InterpreterError(f"file not found: {filename}")

    opened = Stream(source=filename, type=StreamType.MULTI)
    if ctx.debug:
        print(f"Opened file: {filename}")
    return opened


def cmd_export(ctx: Context, stream: Optional[Stream], args: Sequence[Any]) -> Stream:
    """Export a stream variable to a file and return the stream."""
    if len(args) != 2:
        raise InterpreterError("export command requires exactly two arguments")

    source_arg, output_arg = args
    if not isinstance(source_arg, Ident):
        raise InterpreterError(
            "export command requires as first argument a stream but got: "
            f"{type(source_arg).__name__}"
        )
    box = ctx.get_var(source_arg)
    if box.kind != ValueKind.STREAM:
        raise InterpreterError(
            f"export command requires as first argument a stream but got: {source_arg}"
        )
    source: Stream = box.value

    if isinstance(output_arg, LiteralString):
        output = _unquote(output_arg.value)
    elif isinstance(output_arg, Ident):
        value = ctx.get_var(output_arg)
        if value.kind != ValueKind.STRING:
            raise InterpreterError(
                f"export command requires as second argument a string but got: {output_arg}"
            )
        output = _unquote(str(value.value))
    else:
        raise InterpreterError(
            f"export command requires as second argument a string but got: {output_arg}"
        )

    job = ExportJob(stream=source, output=output, overwrite=True)
    if ctx.debug:
        print(f"Exporting to file: {output}")
        print(f"Export job: {job}")

    if ctx.exporter is not None:
        try:
            ctx.exporter(job)
        except Exception as exc:
            raise InterpreterError(f"export failed: {exc}") from exc
    ctx.exports.append(job)

    if ctx.debug:
        print("Export completed successfully")
    return source


_HANDLERS: dict[str, Handler] = {
    "open": cmd_open,
    "export": cmd_export,
}


def get_handler(name: str) -> Optional[Handler]:
    """Return the handler of the command *name*, or None if there is none."""
    return _HANDLERS.get(name)