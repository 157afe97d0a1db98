"""Lexical analysis for meowlang. Scans raw source character by character into a flat list of Tokens that always ends
with exactly one EOF token.

Scanning never fails: anything that cannot be classified becomes an ILLEGAL token and is left for the parser to
complain about.

```
<ident>   ::= (<letter> | "_")+               ; keywords are idents found in token.KEYWORDS
<int>     ::= <digit>+                        ; ASCII digits only
<string>  ::= '"' <char except '"'>* '"'      ; no escape sequences, may span lines
<comment> ::= "//" <char>* <newline> | "/*" <char>* "*/"
```
"""

import string

from meowlang.syntax import token
from meowlang.syntax.token import Token


class Lexer:
    """Character scanner over a single source buffer."""

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    @property
    def char(self):
        """Current character, or "" at end of input."""
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def peek(self, offset=1):
        idx = self.pos + offset
        return self.source[idx] if idx < len(self.source) else ""

    def advance(self):
        """Consumes the current character and returns it, keeping line/column in sync."""
        char = self.char
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def tokenize(self):
        """Scans the whole buffer. Total: returns a list of Tokens ending in EOF for any input."""
        tokens = []
        while self.char:
            char = self.char

            if char.isspace():
                self.advance()
            elif char == "/" and self.peek() == "/":
                self.skip_line_comment()
            elif char == "/" and self.peek() == "*":
                self.skip_block_comment()
            else:
                tokens.append(self.next_token())

        tokens.append(Token(token.EOF, "", self.line, self.column))
        return tokens

    def next_token(self):
        """Scans one token starting at the current (non-space, non-comment) character."""
        line, column = self.line, self.column
        char = self.char

        if Lexer.is_letter(char):
            literal = self.read_while(Lexer.is_letter)
            return Token(token.lookup_ident(literal), literal, line, column)

        if Lexer.is_digit(char):
            return Token(token.INT, self.read_while(Lexer.is_digit), line, column)

        if char == "\"":
            return self.read_string(line, column)

        if char in "=!" and self.peek() == "=":
            literal = self.advance() + self.advance()
            return Token(token.EQ if literal == "==" else token.NOT_EQ, literal, line, column)

        self.advance()
        if char == "=":
            return Token(token.ASSIGN, char, line, column)
        if char == "!":
            return Token(token.BANG, char, line, column)
        if char == "/":
            return Token(token.SLASH, char, line, column)
        return Token(token.SINGLE.get(char, token.ILLEGAL), char, line, column)

    def read_while(self, predicate):
        start = self.pos
        while self.char and predicate(self.char):
            self.advance()
        return self.source[start:self.pos]

    def read_string(self, line, column):
        """Reads a double-quoted string. The literal excludes the quotes; an unterminated string is ILLEGAL."""
        start = self.pos
        self.advance()  # opening quote
        while self.char and self.char != "\"":
            self.advance()

        if not self.char:
            return Token(token.ILLEGAL, self.source[start:], line, column)

        self.advance()  # closing quote
        return Token(token.STRING, self.source[start + 1:self.pos - 1], line, column)

    def skip_line_comment(self):
        while self.char and self.char != "\n":
            self.advance()

    def skip_block_comment(self):
        """Skips /* ... */. Comments do not nest; an unterminated comment runs to end of input."""
        self.advance()
        self.advance()
        while self.char and not (self.char == "*" and self.peek() == "/"):
            self.advance()
        if self.char:
            self.advance()
            self.advance()

    @staticmethod
    def is_letter(char):
        return char.isalpha() or char == "_"

    @staticmethod
    def is_digit(char):
        return char in string.digits


def tokenize(source):
    """Convenience wrapper: tokenize(source) == Lexer(source).tokenize()."""
    return Lexer(source).tokenize()
