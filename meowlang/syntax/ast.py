"""Abstract syntax tree for meowlang. Node variants are a closed set: Statements and Expressions below, plus the
Program root. Every node keeps the token it was built from, and str(node) gives back a canonical source form (infix
expressions fully parenthesised) that is used when displaying function values.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from meowlang.syntax.token import Token


class Node:
    token: Token

    def token_literal(self):
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


# ======================================
# Expressions
# ======================================

@dataclass
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self):
        return self.value


@dataclass
class IntegerLiteral(Expression):
    token: Token
    value: int

    def __str__(self):
        return str(self.value)


@dataclass
class StringLiteral(Expression):
    token: Token
    value: str

    def __str__(self):
        return f"\"{self.value}\""


@dataclass
class InfixExpression(Expression):
    token: Token  # the operator token
    left: Expression
    operator: str
    right: Expression

    def __str__(self):
        # walks the left spine in a loop so that long chains print without deep recursion
        spine = [self]
        while isinstance(spine[-1].left, InfixExpression):
            spine.append(spine[-1].left)

        text = str(spine[-1].left)
        for node in reversed(spine):
            text = f"({text} {node.operator} {node.right})"
        return text


@dataclass
class CallExpression(Expression):
    token: Token  # the '(' token
    function: Expression
    arguments: List[Expression]

    def __str__(self):
        return f"{self.function}({', '.join(map(str, self.arguments))})"


# ======================================
# Statements
# ======================================

@dataclass
class Block(Statement):
    token: Token  # the '{' token
    statements: List[Statement]

    def __str__(self):
        return "\n".join(map(str, self.statements))


@dataclass
class Assignment(Statement):
    token: Token  # lick
    name: Identifier
    value: Expression

    def __str__(self):
        return f"{self.token.literal} {self.name} = {self.value}"


@dataclass
class FunctionDeclaration(Statement):
    token: Token  # meow
    name: Identifier
    parameters: List[Identifier]
    body: Block

    def __str__(self):
        params = ", ".join(map(str, self.parameters))
        return f"{self.token.literal} {self.name}({params}) {{\n{self.body}\n}}"


@dataclass
class Return(Statement):
    token: Token  # claw
    value: Optional[Expression] = None

    def __str__(self):
        return self.token.literal if self.value is None else f"{self.token.literal} {self.value}"


@dataclass
class Print(Statement):
    token: Token  # purr
    value: Expression

    def __str__(self):
        return f"{self.token.literal} {self.value}"


@dataclass
class Program(Node):
    """Root node. errors holds the parser's diagnostics; a non-empty list means statements is a partial tree."""
    statements: List[Statement] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def token_literal(self):
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self):
        return "\n".join(map(str, self.statements))
