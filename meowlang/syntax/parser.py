"""Recursive descent parser for meowlang. Statements are dispatched on their leading keyword, expressions are parsed by
precedence climbing.

```
<program>    ::= <statement>*
<statement>  ::= "lick" <ident> "=" <expr> [";"]
               | "meow" <ident> "(" [<ident> ("," <ident>)*] ")" <block> [";"]
               | "claw" [<expr>] [";"]
               | "purr" <expr> [";"]
<block>      ::= "{" <statement>* "}"
<expr>       ::= <primary> | <expr> <binop> <expr> | <expr> "(" [<expr> ("," <expr>)*] ")"
<primary>    ::= <int> | <string> | <ident> | "(" <expr> ")"
```

The parser never raises on malformed input. Diagnostics are collected in Parser.errors and the statements that could
be built are still returned. Every pass of the statement loop consumes at least one token, so parsing always
terminates.
"""

from meowlang.syntax import ast, token
from meowlang.syntax.lexer import tokenize


# precedence levels, lowest to highest
LOWEST = 1
EQUALS = 2       # == !=
LESSGREATER = 3  # < >
SUM = 4          # + -
PRODUCT = 5      # * /
CALL = 6         # f(...)

PRECEDENCES = {
    token.EQ: EQUALS,
    token.NOT_EQ: EQUALS,
    token.LT: LESSGREATER,
    token.GT: LESSGREATER,
    token.PLUS: SUM,
    token.MINUS: SUM,
    token.ASTERISK: PRODUCT,
    token.SLASH: PRODUCT,
    token.LPAREN: CALL,
}

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Parser:
    """Single-use parser over a token list produced by the lexer. The list must end with an EOF token."""

    def __init__(self, tokens):
        if not tokens or tokens[-1].kind != token.EOF:
            tokens = list(tokens) + [token.Token(token.EOF, "")]

        self.tokens = tokens
        self.current = 0
        self.errors = []        # diagnostic messages
        self.error_tokens = []  # token each diagnostic refers to, same order as errors

        self.statement_parsers = {
            token.LICK: self.parse_assignment,
            token.MEOW: self.parse_function_declaration,
            token.CLAW: self.parse_return,
            token.PURR: self.parse_print,
        }

    # ======================================
    # Token cursor
    # ======================================

    def peek(self):
        return self.tokens[self.current]

    def advance(self):
        """Consumes and returns the current token. EOF is never consumed."""
        tok = self.tokens[self.current]
        if tok.kind != token.EOF:
            self.current += 1
        return tok

    def check(self, kind):
        return self.peek().kind == kind

    def is_at_end(self):
        return self.check(token.EOF)

    def error(self, msg, tok=None):
        """Records a diagnostic about tok (the current token by default)."""
        self.errors.append(msg)
        self.error_tokens.append(tok if tok is not None else self.peek())

    def expect(self, kind):
        """Consumes and returns the current token if it is of the given kind. Otherwise records a diagnostic, consumes
        nothing and returns None.
        """
        if self.check(kind):
            return self.advance()

        self.error(f"expected next token to be {kind}, got {self.peek().kind} instead")
        return None

    def skip_semicolon(self):
        if self.check(token.SEMICOLON):
            self.advance()

    # ======================================
    # Statements
    # ======================================

    def parse_program(self):
        program = ast.Program()

        while not self.is_at_end():
            start = self.current
            stmt = self.parse_statement()

            if stmt is not None:
                program.statements.append(stmt)
            elif self.current == start:
                self.advance()  # nothing consumed: skip the offending token

        program.errors = list(self.errors)
        return program

    def parse_statement(self):
        """Returns a Statement, or None if the current token does not start one (or the statement is malformed)."""
        statement_parser = self.statement_parsers.get(self.peek().kind)
        if statement_parser is None:
            return None

        stmt = statement_parser()
        if stmt is not None:
            self.skip_semicolon()
        return stmt

    def parse_assignment(self):
        tok = self.advance()  # lick

        name = self.parse_name()
        if name is None or self.expect(token.ASSIGN) is None:
            return None

        value = self.parse_expression(LOWEST)
        if value is None:
            return None

        return ast.Assignment(tok, name, value)

    def parse_function_declaration(self):
        tok = self.advance()  # meow

        name = self.parse_name()
        if name is None:
            return None

        parameters = self.parse_parameters()
        if parameters is None:
            return None

        body = self.parse_block()
        if body is None:
            return None

        return ast.FunctionDeclaration(tok, name, parameters, body)

    def parse_parameters(self):
        """Parses '(' [ident (',' ident)*] ')'. Returns list of Identifiers, or None on failure."""
        if self.expect(token.LPAREN) is None:
            return None

        parameters = []
        if self.check(token.RPAREN):
            self.advance()
            return parameters

        while True:
            param = self.parse_name()
            if param is None:
                return None
            parameters.append(param)

            if not self.check(token.COMMA):
                break
            self.advance()

        if self.expect(token.RPAREN) is None:
            return None
        return parameters

    def parse_block(self):
        """Parses '{' statement* '}'. Hitting EOF before '}' records a diagnostic and ends the block there."""
        tok = self.expect(token.LBRACE)
        if tok is None:
            return None

        block = ast.Block(tok, [])
        while not self.check(token.RBRACE) and not self.is_at_end():
            start = self.current
            stmt = self.parse_statement()

            if stmt is not None:
                block.statements.append(stmt)
            elif self.current == start:
                self.advance()

        self.expect(token.RBRACE)
        return block

    def parse_return(self):
        tok = self.advance()  # claw

        if not self.starts_expression():
            return ast.Return(tok)

        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        return ast.Return(tok, value)

    def parse_print(self):
        tok = self.advance()  # purr

        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        return ast.Print(tok, value)

    def parse_name(self):
        tok = self.expect(token.IDENT)
        return ast.Identifier(tok, tok.literal) if tok is not None else None

    # ======================================
    # Expressions
    # ======================================

    def starts_expression(self):
        return self.peek().kind in (token.INT, token.STRING, token.IDENT, token.LPAREN)

    def current_precedence(self):
        return PRECEDENCES.get(self.peek().kind, LOWEST)

    def parse_expression(self, precedence):
        """Precedence climbing: only operators binding tighter than precedence are folded into left."""
        left = self.parse_primary()

        while left is not None and self.current_precedence() > precedence:
            if self.check(token.LPAREN):
                left = self.parse_call(left)
            else:
                left = self.parse_infix(left)

        return left

    def parse_primary(self):
        tok = self.peek()

        if tok.kind == token.INT:
            return self.parse_integer_literal()
        if tok.kind == token.STRING:
            return ast.StringLiteral(self.advance(), tok.literal)
        if tok.kind == token.IDENT:
            return ast.Identifier(self.advance(), tok.literal)
        if tok.kind == token.LPAREN:
            self.advance()
            expr = self.parse_expression(LOWEST)
            if expr is None or self.expect(token.RPAREN) is None:
                return None
            return expr

        self.error(f"no expression can start with {tok.kind} '{tok.literal}'", tok)
        return None

    def parse_integer_literal(self):
        tok = self.advance()

        # more digits than INT64_MAX is out of range, and int() refuses very long digit strings
        digits = tok.literal.lstrip("0") or "0"
        if len(digits) > len(str(INT64_MAX)):
            self.error(f"could not parse '{tok.literal}' as a 64-bit integer", tok)
            return None

        value = int(digits)
        if not INT64_MIN <= value <= INT64_MAX:
            self.error(f"could not parse '{tok.literal}' as a 64-bit integer", tok)
            return None

        return ast.IntegerLiteral(tok, value)

    def parse_infix(self, left):
        tok = self.advance()

        right = self.parse_expression(PRECEDENCES[tok.kind])
        if right is None:
            return None
        return ast.InfixExpression(tok, left, tok.literal, right)

    def parse_call(self, function):
        tok = self.advance()  # (

        arguments = []
        if self.check(token.RPAREN):
            self.advance()
            return ast.CallExpression(tok, function, arguments)

        while True:
            arg = self.parse_expression(LOWEST)
            if arg is None:
                return None
            arguments.append(arg)

            if not self.check(token.COMMA):
                break
            self.advance()

        if self.expect(token.RPAREN) is None:
            return None
        return ast.CallExpression(tok, function, arguments)


def parse(tokens):
    """Parses tokens into a Program. Diagnostics are available as Program.errors."""
    return Parser(tokens).parse_program()


def parse_source(source):
    """Tokenizes and parses source in one step."""
    return parse(tokenize(source))
