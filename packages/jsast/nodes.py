"""Typed node definitions for the ESTree subset accepted by the PFA translator.

An external parser (esprima, acorn, ...) produces ESTree JSON; :mod:`loader`
turns that JSON into the dataclasses below.  The set of node classes is closed:
anything the loader does not recognise becomes an :class:`Unsupported` node
that remembers its original ``type`` tag, so translation fails at the point
where the construct is used rather than while loading.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, Optional, Sequence

# ---------------------------------------------------------------------------
# Shared utilities


@dataclass(slots=True)
class Span:
    """Represents the start/end position of a node in the source file."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_tuple(self) -> tuple[int, int, int, int]:
        return (self.start_line, self.start_column, self.end_line, self.end_column)


@dataclass(slots=True, kw_only=True)
class Node:
    """Base class for all AST nodes.

    ``span`` is optional because parsers only emit ``loc`` when asked to, and
    tests occasionally build nodes by hand.  ``metadata`` keeps any extra keys
    from the ESTree payload that the translator does not model (``range``,
    ``raw``, ...).
    """

    span: Optional[Span] = None
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def node_type(self) -> str:
        """ESTree ``type`` tag of this node."""

        return self.__class__.__name__

    def children(self) -> Iterator[Node]:
        for item in fields(self):
            if item.name in {"span", "metadata"}:
                continue
            value = getattr(self, item.name)
            yield from _iter_possible_children(value)

    def walk(self) -> Iterator[Node]:
        """Depth-first traversal starting at this node."""

        yield self
        for child in self.children():
            yield from child.walk()


Expression = Node
Statement = Node


# ---------------------------------------------------------------------------
# Expressions


@dataclass(slots=True)
class Literal(Node):
    """Scalar literal: string, number, boolean or ``null``.

    ``regex`` holds the pattern source for regular-expression literals, which
    the translator rejects.
    """

    value: object
    regex: Optional[str] = None


@dataclass(slots=True)
class Identifier(Node):
    name: str


@dataclass(slots=True)
class ArrayExpression(Node):
    # ``None`` entries are holes (``[1, , 2]``).
    elements: list[Optional[Expression]]


@dataclass(slots=True)
class Property(Node):
    """Single ``key: value`` entry of an object literal."""

    key: Expression
    value: Expression
    kind: str = "init"
    computed: bool = False


@dataclass(slots=True)
class ObjectExpression(Node):
    # Entries are Property nodes, or Unsupported for spreads and the like.
    properties: list[Node]


@dataclass(slots=True)
class MemberExpression(Node):
    object: Expression
    property: Expression
    computed: bool = False


@dataclass(slots=True)
class UnaryExpression(Node):
    operator: str
    argument: Expression
    prefix: bool = True


@dataclass(slots=True)
class BinaryExpression(Node):
    """Binary operation; ESTree ``LogicalExpression`` is loaded as this too."""

    operator: str
    left: Expression
    right: Expression


@dataclass(slots=True)
class ConditionalExpression(Node):
    test: Expression
    consequent: Expression
    alternate: Expression


@dataclass(slots=True)
class CallExpression(Node):
    callee: Expression
    arguments: list[Expression]


@dataclass(slots=True)
class NewExpression(Node):
    callee: Expression
    arguments: list[Expression]


@dataclass(slots=True)
class FunctionExpression(Node):
    """Function literal.

    ``defaults`` is aligned with ``params``: entry ``i`` is the default value
    expression of parameter ``i`` or ``None``.  This mirrors the esprima 1.x
    layout; the loader converts ``AssignmentPattern`` parameters into it.
    """

    params: list[Node]
    defaults: list[Optional[Expression]]
    body: Node
    id: Optional[Identifier] = None
    rest: Optional[Node] = None
    generator: bool = False
    expression: bool = False
    is_async: bool = False


@dataclass(slots=True)
class VariableDeclarator(Node):
    id: Node
    init: Optional[Expression] = None


@dataclass(slots=True)
class VariableDeclaration(Node):
    declarations: list[VariableDeclarator]
    kind: str = "var"


@dataclass(slots=True)
class AssignmentExpression(Node):
    operator: str
    left: Node
    right: Expression


@dataclass(slots=True)
class UpdateExpression(Node):
    operator: str
    argument: Expression
    prefix: bool = False


@dataclass(slots=True)
class SequenceExpression(Node):
    expressions: list[Expression]


# ---------------------------------------------------------------------------
# Statements


@dataclass(slots=True)
class BlockStatement(Node):
    body: list[Statement]


@dataclass(slots=True)
class ExpressionStatement(Node):
    expression: Expression


@dataclass(slots=True)
class IfStatement(Node):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None


@dataclass(slots=True)
class WhileStatement(Node):
    test: Expression
    body: Statement


@dataclass(slots=True)
class DoWhileStatement(Node):
    body: Statement
    test: Expression


@dataclass(slots=True)
class ForStatement(Node):
    init: Optional[Node]
    test: Optional[Expression]
    update: Optional[Expression]
    body: Statement


@dataclass(slots=True)
class ForInStatement(Node):
    left: Node
    right: Expression
    body: Statement


@dataclass(slots=True)
class ThrowStatement(Node):
    argument: Expression


@dataclass(slots=True)
class EmptyStatement(Node):
    pass


@dataclass(slots=True)
class Program(Node):
    body: list[Statement]


@dataclass(slots=True)
class Unsupported(Node):
    """Any ESTree node outside the accepted subset, e.g. ``ReturnStatement``."""

    type_name: str

    @property
    def node_type(self) -> str:
        return self.type_name


# ---------------------------------------------------------------------------
# Helper functions


def _iter_possible_children(value: object) -> Iterator[Node]:
    if isinstance(value, Node):
        yield value
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            if isinstance(item, Node):
                yield item
            elif isinstance(item, Sequence) and not isinstance(item, (str, bytes, bytearray)):
                yield from _iter_possible_children(item)
