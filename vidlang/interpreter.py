"""Evaluation of parsed scripts."""

from __future__ import annotations

from typing import Any, Optional

from .commands import get_handler
from .nodes import Assign, Command, Expr, Ident
from .parser import Parser
from .runtime import Context, Exporter, InterpreterError, Stream, ValueBox, ValueKind


class Interpreter:
    """Runs every top-level node of a script against a context."""

    def __init__(self, code: str, ctx: Optional[Context] = None) -> None:
        self.parser = Parser(code)
        self.ctx = ctx if ctx is not None else Context()

    def run(self) -> None:
        """Evaluate the script's nodes in order, stopping at the first error."""
        for node in self.parser:
            evaluate(self.ctx, node)


def interpret(
    code: str, debug: bool = False, exporter: Optional[Exporter] = None
) -> Context:
    """Run *code* and return the context it left behind."""
    ctx = Context(debug=debug, exporter=exporter)
    Interpreter(code, ctx).run()
    return ctx


def evaluate(ctx: Context, node: Any) -> None:
    """Evaluate one top-level node."""
    if isinstance(node, Assign):
        evaluate_assignment(ctx, node)
    elif isinstance(node, Expr):
        ctx.scope_stream = evaluate_expression(ctx, node)
    else:
        raise InterpreterError(f"unsupported node type: {type(node).__name__}")


def evaluate_assignment(ctx: Context, node: Assign) -> None:
    """Bind the value of an assignment to its destination."""
    if not node.dest:
        raise InterpreterError("invalid assignment: no destination")

    box: Optional[ValueBox] = None
    if isinstance(node.value, Expr):
        box = ValueBox(evaluate_expression(ctx, node.value), ValueKind.STREAM)

    if len(node.dest) > 1:
        raise InterpreterError("cannot assign stream to multiple variables for now")

    if box is not None:
        ctx.set_box(node.dest[0], box)
    else:
        ctx.set_literal(node.dest[0], node.value)


def evaluate_expression(ctx: Context, expr: Expr) -> Optional[Stream]:
    """Evaluate an expression's input and pipeline, returning the last stream."""
    inputs = list(expr.input or ())
    if len(inputs) > 1:
        raise InterpreterError("multiple inputs not supported yet")

    stream: Optional[Stream] = None
    if inputs:
        source = inputs[0]
        if not isinstance(source, Ident):
            raise InterpreterError(f"invalid input type: {type(source).__name__}")
        box = ctx.get_var(source)
        if box.kind != ValueKind.STREAM:
            raise InterpreterError(f"variable {source} is not a stream")
        stream = box.value

    for cmd in expr.pipeline:
        stream = evaluate_command(ctx, cmd, None)
    return stream


def evaluate_command(ctx: Context, cmd: Command, stream: Optional[Stream]) -> Stream:
    """Run a command through its handler."""
    handler = get_handler(cmd.name)
    if handler is None:
        raise InterpreterError(f"unknown command: {cmd.name}")
    return handler(ctx, stream, cmd.args)