"""Runtime values for meowlang: Integer, String, Function and Null. Values are immutable; only bindings change."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from meowlang.syntax import ast


INTEGER_OBJ = "INTEGER"
STRING_OBJ = "STRING"
FUNCTION_OBJ = "FUNCTION"
NULL_OBJ = "NULL"


class Value(ABC):
    type_name = None

    @abstractmethod
    def inspect(self):
        """Human-readable form, as written by print statements."""

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Value):
    value: int
    type_name = INTEGER_OBJ

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str
    type_name = STRING_OBJ

    def inspect(self):
        return self.value


@dataclass(frozen=True, eq=False)
class Function(Value):
    """A closure: parameter names and body paired with the environment active at the declaration. The environment is
    shared, not copied, so later bindings in the defining scope stay visible to the function.
    """
    parameters: List[str]
    body: ast.Block
    env: "Environment"
    type_name = FUNCTION_OBJ

    def inspect(self):
        return f"meow({', '.join(self.parameters)}) {{\n{self.body}\n}}"


class Null(Value):
    type_name = NULL_OBJ

    def inspect(self):
        return "null"

    def __eq__(self, other):
        return isinstance(other, Null)

    def __hash__(self):
        return hash(NULL_OBJ)

    def __repr__(self):
        return "Null()"


NULL = Null()
