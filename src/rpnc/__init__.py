'''
RPN calculator.

Supports plain old arithmetic, bitwise and percent operators, most of
Python's mathematical functions, whole stack (batch) functions, variables,
one level of undo, and your usual stack operators. Functions can be added
in Lua. Not intended to be Turing-complete!

Use interactively, with expressions on the command line, or with input
piped in.
'''

from .cli import CLI
from .interpreter import Interpreter
from .lexer import Lexer
from .machine import Machine
from .stack import Stack


__all__ = 'Machine', 'Stack', 'Lexer', 'Interpreter', 'CLI'
