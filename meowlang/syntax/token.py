"""Token kinds for the meowlang language. A token kind is a plain string: symbol kinds are spelled as the symbol itself
(so that parser diagnostics read naturally), everything else is an upper-case name.
"""

from dataclasses import dataclass, field


# special
ILLEGAL = "ILLEGAL"
EOF = "EOF"

# identifiers + literals
IDENT = "IDENT"
INT = "INT"
STRING = "STRING"

# operators
ASSIGN = "="
PLUS = "+"
MINUS = "-"
BANG = "!"
ASTERISK = "*"
SLASH = "/"
LT = "<"
GT = ">"
EQ = "=="
NOT_EQ = "!="

# delimiters
COMMA = ","
SEMICOLON = ";"
LPAREN = "("
RPAREN = ")"
LBRACE = "{"
RBRACE = "}"

# keywords
LICK = "LICK"        # assignment
MEOW = "MEOW"        # function declaration
CLAW = "CLAW"        # return
PURR = "PURR"        # print
HISS = "HISS"        # reserved
GROWL = "GROWL"      # reserved
SCRATCH = "SCRATCH"  # reserved
NAP = "NAP"          # reserved

KEYWORDS = {
    "lick": LICK,
    "meow": MEOW,
    "claw": CLAW,
    "purr": PURR,
    "hiss": HISS,
    "growl": GROWL,
    "scratch": SCRATCH,
    "nap": NAP,
}

# single characters that always form a token on their own
SINGLE = {
    "+": PLUS,
    "-": MINUS,
    "*": ASTERISK,
    "<": LT,
    ">": GT,
    ",": COMMA,
    ";": SEMICOLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
}


@dataclass(frozen=True)
class Token:
    """Smallest classified unit of source text. line and column are 1-based and ignored by ==."""
    kind: str
    literal: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self):
        return f"Token({self.kind}, {self.literal!r})"


def lookup_ident(ident):
    """Returns keyword kind of ident, or IDENT if ident is not a keyword."""
    return KEYWORDS.get(ident, IDENT)
