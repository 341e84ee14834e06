"""Values, streams and the running state of the interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

from .nodes import LiteralBool, LiteralNumber, LiteralString, NodeList, SubExpr
from .tokens import GLOBAL_STREAM


class StreamType(IntEnum):
    """The kind of media a stream carries."""

    VIDEO = 0
    AUDIO = 1
    MULTI = 2


class ValueKind(IntEnum):
    """The kind of value held by a variable."""

    STREAM = 0
    BOOL = 1
    NUMBER = 2
    STRING = 3
    LIST = 4
    SUB_EXPR = 5


@dataclass(frozen=True)
class Stream:
    """A media stream opened from a source file."""

    source: str
    type: StreamType = StreamType.MULTI


@dataclass(frozen=True)
class ValueBox:
    """A value together with its kind."""

    value: Any
    kind: ValueKind


@dataclass(frozen=True)
class ExportJob:
    """A request to write *stream* to the file *output*."""

    stream: Stream
    output: str
    overwrite: bool = True

    def __str__(self) -> str:
        suffix = " (overwrite)" if self.overwrite else ""
        return f"{self.stream.source} -> {self.output}{suffix}"


class InterpreterError(Exception):
    """An error raised while evaluating a script."""


Exporter = Callable[[ExportJob], None]

_LITERAL_KINDS: tuple[tuple[type, ValueKind], ...] = (
    (LiteralBool, ValueKind.BOOL),
    (LiteralNumber, ValueKind.NUMBER),
    (LiteralString, ValueKind.STRING),
    (SubExpr, ValueKind.SUB_EXPR),
    (NodeList, ValueKind.LIST),
)


class Context:
    """Variables, the current global stream and the export settings."""

    def __init__(self, debug: bool = False, exporter: Optional[Exporter] = None) -> None:
        self.debug = debug
        self.exporter = exporter
        self.variables: dict[str, ValueBox] = {}
        self.scope_stream: Optional[Stream] = None
        self.exports: list[ExportJob] = []

    def get_var(self, name: Any) -> ValueBox:
        """Look up a variable; ``stream`` names the current global stream."""
        key = str(name)
        if key == GLOBAL_STREAM:
            if self.scope_stream is None:
                raise InterpreterError("global stream is not set")
            return ValueBox(self.scope_stream, ValueKind.STREAM)
        try:
            return self.variables[key]
        except KeyError:
            raise InterpreterError(f"variable {key} not found") from None

    def set_var(self, name: Any, kind: ValueKind, value: Any) -> None:
        """Store *value* of the given *kind* under *name*."""
        self.variables[str(name)] = ValueBox(value, kind)

    def set_literal(self, name: Any, node: Any) -> None:
        """Store a literal node under *name*, its kind taken from its type."""
        for node_type, kind in _LITERAL_KINDS:
            if isinstance(node, node_type):
                self.variables[str(name)] = ValueBox(node, kind)
                return
        raise InterpreterError(f"cannot assign value of type {type(node).__name__}")

    def set_box(self, name: Any, box: ValueBox) -> None:
        """Store an already boxed value under *name*."""
        self.variables[str(name)] = box