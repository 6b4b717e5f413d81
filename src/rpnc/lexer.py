from collections import namedtuple
from enum import Enum
from functools import reduce
import math
import operator

import regex

from .funcs import FUNCTIONS, BATCH_FUNCTIONS, CONSTANTS


class Kind(Enum):
    '''
    What a token means, in order of precedence.
    '''
    NUMBER = 'number'
    CONSTANT = 'constant'
    FUNCTION = 'function'
    BATCH = 'batch'
    EXTENSION = 'extension'
    STORE = 'store'
    LOAD = 'load'
    COMMAND = 'command'
    HELP = 'help'
    UNKNOWN = 'unknown'


# value is the number to push, the Function or Command to run, or the
# register or extension name.
Lexeme = namedtuple('Lexeme', 'kind token value')


class Lexer:
    '''
    Lexer for the RPN *regular* grammar.

    Splits lines into whitespace separated tokens and classifies each token
    against the known names. Holds the name tables, but no state of its own:
    classification depends only on the token and the batch flag.
    '''
    # Integral part of a number
    INTEGRAL = r'''
                # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                (?:
                    # 1, 12, or the 1 in 1_200.
                    \d{1,3}
                    (?:
                        # The 4, 45, etc. in 1234, 12345, etc.
                        \d
                        |
                        # Support not just digits, but thousands separators
                        (?:
                            _\d{3}
                        )
                    )*
                )
                '''
    # Fractional part of a number
    FRACTIONAL = r'''
                  # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                  (?:
                      \d+
                      (?:
                          _\d{1,3}
                      )*
                  )
                  '''
    EXPONENT = r'''
                (?:
                    [eE]
                    [-+]?
                    \d+
                )
                '''
    # Decimal number, what float() accepts minus the oddities.
    # String formatting and regex is a tricky business, because of the braces.
    # It works here. Be careful in general!
    NUMBER = r'''
              [-+]?
              (?:
                  (?:
                      # 1, 12, 1_200, 1_200. (notice trailing dot), 1.3
                      {INTEGRAL}
                      (?:
                          \.
                          {FRACTIONAL}?
                      )?
                      {EXPONENT}?
                  )|(?:
                      # .2, 0.2, 0.200_200
                      {INTEGRAL}?
                      \.
                      {FRACTIONAL}
                      {EXPONENT}?
                  )|(?i:
                      inf(?:inity)?
                      |
                      nan
                  )
              )
              '''.format(INTEGRAL=INTEGRAL,
                         FRACTIONAL=FRACTIONAL,
                         EXPONENT=EXPONENT)
    # 1:30 is 1.5 hours
    TIME = r'(?<hour>\d+):(?<minute>\d+)'
    HEX = r'0[xX](?<hex>[0-9a-fA-F]+)'
    # >NAME stores, <NAME loads
    REGISTER = r'(?<direction>[<>])(?<name>[A-Z][A-Z0-9_]*)'
    # Unescaped # till end of line. Can't be VERBOSE, # is a comment there.
    COMMENT = regex.compile(r'(?<!\\)#.*$', flags=regex.MULTILINE)
    SPACE = regex.compile(r'\s+')
    HELP = frozenset({'help', '?'})

    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, functions=FUNCTIONS, batch_functions=BATCH_FUNCTIONS,
                 constants=CONSTANTS, extensions=None, commands=None):
        '''
        :param extensions: Mapping of extension function names, owned by the
                           extension interpreter.
        :param commands: Mapping of management command names to commands.
        '''
        self.functions = functions
        self.batch_functions = batch_functions
        self.constants = constants
        self.extensions = extensions if extensions is not None else {}
        self.commands = commands if commands is not None else {}

    def _match(self, pattern, token):
        return regex.fullmatch(pattern, token, flags=type(self).FLAGS)

    def strip(self, line):
        '''
        Remove comments and surrounding whitespace.
        '''
        return type(self).COMMENT.sub('', line).strip()

    def lex(self, line):
        '''
        Take a line and return all tokens, comments removed.
        '''
        line = self.strip(line)
        if not line:
            return []
        return type(self).SPACE.split(line)

    def number(self, token):
        '''
        Return the value of a literal, or None if token isn't one.

        Literals too large for a float are infinite, like 1e999.
        '''
        if self._match(type(self).NUMBER, token):
            return float(token.replace('_', ''))
        match = self._match(type(self).TIME, token)
        if match:
            return float(match.group('hour')) + \
                float(match.group('minute')) / 60
        match = self._match(type(self).HEX, token)
        if match:
            try:
                return float(int(match.group('hex'), 16))
            except OverflowError:
                return math.inf
        return None

    def classify(self, token, batch=False):
        '''
        Decide what token means. First match wins.

        In batch mode, names of the batch table shadow the normal table, so
        that + sums up the whole stack.
        '''
        number = self.number(token)
        if number is not None:
            return Lexeme(Kind.NUMBER, token, number)
        if token in self.constants:
            return Lexeme(Kind.CONSTANT, token, self.constants[token])
        if token in self.functions and \
           not (batch and token in self.batch_functions):
            return Lexeme(Kind.FUNCTION, token, self.functions[token])
        if token in self.batch_functions:
            return Lexeme(Kind.BATCH, token, self.batch_functions[token])
        if token in self.extensions:
            return Lexeme(Kind.EXTENSION, token, token)
        match = self._match(type(self).REGISTER, token)
        if match:
            kind = Kind.STORE if match.group('direction') == '>' \
                else Kind.LOAD
            return Lexeme(kind, token, match.group('name'))
        if token in self.commands:
            return Lexeme(Kind.COMMAND, token, self.commands[token])
        if token in type(self).HELP:
            return Lexeme(Kind.HELP, token, None)
        return Lexeme(Kind.UNKNOWN, token, None)

    def names(self):
        '''
        Every name the lexer knows, for completion.
        '''
        names = set(self.functions) | set(self.batch_functions)
        names |= set(self.constants) | set(self.extensions)
        names |= set(self.commands) | type(self).HELP
        return sorted(names)
