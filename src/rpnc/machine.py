import sys
import logging
import pydoc
import subprocess

from .commands import COMMANDS, TABLES
from .editor import edit_numbers
from .funcs import BATCH, FUNCTIONS, BATCH_FUNCTIONS, CONSTANTS
from .lexer import Kind, Lexer
from .manual import MANUAL
from .stack import Stack
from .util import (RPNError, ArityError, NameLookupError, ExtensionError,
                   fmtnum, list2str)


log = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine (RPN calculator).

    Takes lines, splits them into tokens and runs them. One machine is one
    session: it owns its stack, registers, history and extension
    interpreter.
    '''

    DEFAULT_PRECISION = 2
    # How many items showstack displays
    SHOW_DEPTH = 5
    FLAGS = ('debug', 'batch', 'showstack', 'intermediate')

    def __init__(self, batch=False, debug=False, showstack=False,
                 intermediate=False, precision=None, stdin=False,
                 interpreter=None, editor=edit_numbers):
        '''
        Create empty stack machine.

        :param stdin: Input isn't interactive: no "= " before results, no
                      stack display.
        :param interpreter: Extension interpreter (see interpreter.py).
        :param editor: Callable taking a list of numbers and returning the
                       edited lines, used by the edit command.
        '''
        self.stack = Stack()
        self.registers = dict()
        self.history = []
        self.batch = batch
        self.debug = False
        self.showstack = showstack
        self.intermediate = intermediate
        self.precision = precision if precision is not None \
            else type(self).DEFAULT_PRECISION
        self.stdin = stdin
        self.interpreter = interpreter
        self.editor = editor
        self.running = True
        self.lexer = Lexer(extensions=interpreter.functions
                           if interpreter is not None else None,
                           commands=COMMANDS)
        if debug:
            self.set('debug', True)

    def set(self, flag, value):
        '''
        Set mode flag.
        '''
        if flag not in type(self).FLAGS:
            raise NameLookupError('no such setting {}'.format(flag))
        setattr(self, flag, value)
        if flag == 'debug':
            logging.getLogger('rpnc').setLevel(logging.DEBUG if value
                                               else logging.WARNING)

    def toggle(self, flag):
        '''
        Flip mode flag and tell about it.
        '''
        self.set(flag, not getattr(self, flag))
        print('{} set to {}'.format(flag, getattr(self, flag)))

    def evaluate(self, line):
        '''
        Run all tokens on line.

        A failing token gets reported on stderr and doesn't stop the tokens
        after it. Returns the last failure, or None.
        '''
        failure = None
        tokens = self.lexer.lex(line)
        for i, token in enumerate(tokens):
            if not self.running:
                break
            try:
                self.feed(token, notdone=i < len(tokens) - 1)
            except RPNError as e:
                self.warn(e)
                failure = e
        if tokens and self.showstack and not self.stdin:
            self.printstack()
        return failure

    def feed(self, token, notdone=False):
        '''
        Stack or run a single token.

        :param notdone: More tokens follow on the same line, so hold back
                        the result unless showing intermediate results.
        '''
        lexeme = self.lexer.classify(token, batch=self.batch)
        log.debug('%s is a %s', token, lexeme.kind.value)
        kind = lexeme.kind
        if kind in (Kind.NUMBER, Kind.CONSTANT):
            self.stack.backup()
            self.stack.push(lexeme.value)
        elif kind is Kind.FUNCTION:
            self.call(lexeme.value, notdone)
        elif kind is Kind.BATCH:
            if not self.batch:
                raise RPNError('{} is only supported in batch mode'.format(
                    token))
            self.call(lexeme.value, notdone)
        elif kind is Kind.EXTENSION:
            self.call_extension(lexeme.value, notdone)
        elif kind is Kind.STORE:
            self.store(lexeme.value)
        elif kind is Kind.LOAD:
            self.load(lexeme.value)
        elif kind is Kind.COMMAND:
            lexeme.value.func(self)
        elif kind is Kind.HELP:
            print(self.render_help())
        else:
            raise NameLookupError('unknown command or operator: {}'.format(
                token))

    def _arguments(self, expectargs):
        '''
        Stack items a function with expectargs wants, still on the stack.
        '''
        if expectargs == BATCH:
            if not len(self.stack):
                raise ArityError('stack is empty')
            return self.stack.all()
        if len(self.stack) < expectargs:
            raise ArityError("stack doesn't provide enough arguments")
        return self.stack.last(expectargs)

    def call(self, function, notdone=False):
        '''
        Run builtin function on the stack.

        The operands stay where they are until the function succeeded.
        '''
        args = self._arguments(function.expectargs)
        result = function(args)
        self._commit(function.name, args, function.expectargs, result,
                     notdone)
        return result

    def call_extension(self, name, notdone=False):
        '''
        Run Lua function on the stack.

        Functions registered with 0 arguments get the top of the stack, but
        leave it there.
        '''
        numargs = self.interpreter.declared_arity(name)
        if numargs < BATCH:
            raise ExtensionError(
                'invalid number of arguments requested by {}'.format(name))
        args = self._arguments(numargs or 1)
        result = self.interpreter.invoke(name, args)
        self._commit(name, args, numargs, result, notdone)
        return result

    def _commit(self, name, args, consumed, result, notdone):
        '''
        Replace the consumed operands with result, record it and show it.
        '''
        self.stack.backup()
        if consumed == BATCH:
            self.stack.clear()
        elif consumed:
            self.stack.shift(consumed)
        self.stack.push(result)
        self.history.append('{} {} -> {}'.format(
            list2str(args, self.precision), name,
            fmtnum(result, self.precision)))
        self.result(notdone)

    def store(self, name):
        '''
        Put the top of the stack into register name, keep it on the stack.
        '''
        if not len(self.stack):
            raise ArityError('stack empty, nothing to put into {}'.format(
                name))
        self.registers[name] = self.stack.last()[0]

    def load(self, name):
        '''
        Push register name onto the stack.
        '''
        if name not in self.registers:
            raise NameLookupError("variable {} doesn't exist".format(name))
        self.stack.backup()
        self.stack.push(self.registers[name])

    def result(self, notdone=False):
        '''
        Print the top of the stack, unless more tokens are to come.
        '''
        if notdone and not self.intermediate:
            return
        prefix = '' if self.stdin else '= '
        print(prefix + fmtnum(self.stack.last()[0], self.precision))

    def printstack(self):
        '''
        Print the last few items of the stack, top last.
        '''
        if len(self.stack) > type(self).SHOW_DEPTH:
            print('…')
        for item in self.stack.last(type(self).SHOW_DEPTH):
            print('   ', fmtnum(item, self.precision))

    def warn(self, error):
        print(error, file=sys.stderr)

    def edit(self):
        '''
        Let the user edit the stack in an external editor.
        '''
        if not len(self.stack):
            raise ArityError('empty stack')
        try:
            lines = self.editor(self.stack.all())
        except (OSError, subprocess.CalledProcessError) as e:
            raise RPNError('could not run editor command: {}'.format(e)) \
                from e
        self.stack.backup()
        self.load_stack(lines)

    def load_stack(self, lines):
        '''
        Replace the stack with one number per line.

        Comments and empty lines are skipped, bad lines reported and
        skipped.
        '''
        numbers = []
        for line in lines:
            line = self.lexer.strip(line)
            if not line:
                continue
            number = self.lexer.number(line)
            if number is None:
                self.warn('{} is not a floating point number!'.format(line))
                continue
            numbers.append(number)
        self.stack.replace(numbers)
        return numbers

    def manual(self):
        pydoc.pager(MANUAL)

    def prompt(self):
        '''
        Prompt showing modes and stack size.
        '''
        modes = ''
        revision = ''
        if self.batch:
            modes += '->batch'
        if self.debug:
            modes += '->debug'
            revision = '/rev{}'.format(self.stack.rev)
        return 'rpn{} [{}{}]» '.format(modes, len(self.stack), revision)

    def completions(self):
        return self.lexer.names()

    def render_help(self):
        '''
        Return help text listing every known name.
        '''
        lines = ['Available commands:']
        for heading, table in TABLES:
            lines.append('')
            lines.append(heading + ':')
            names = dict()
            for name, command in table.items():
                names.setdefault(command, []).append(name)
            for command, aliases in names.items():
                lines.append('{:<20} {}'.format('|'.join(aliases),
                                                command.help))
        lines.append('')
        lines.append('{:<20} {}'.format('help|?', 'show this message'))
        for heading, table in (('Operators and functions', FUNCTIONS),
                               ('Batch functions', BATCH_FUNCTIONS)):
            lines.append('')
            lines.append(heading + ':')
            for name, function in table.items():
                # Skip aliases, their help mentions them
                if function.name == name:
                    lines.append('{:<20} {}'.format(name, function.help))
        lines.append('')
        lines.append('Constants:')
        lines.append(' '.join(CONSTANTS))
        lines.append('')
        lines.append('Register variables:')
        lines.append('{:<20} {}'.format(
            '>NAME', 'put last stack element into variable NAME'))
        lines.append('{:<20} {}'.format(
            '<NAME', 'retrieve variable NAME and put it onto the stack'))
        if self.interpreter is not None and self.interpreter.names():
            lines.append('')
            lines.append('Lua functions:')
            for name in self.interpreter.names():
                lines.append('{:<20} {}'.format(
                    name, self.interpreter.help(name)))
        return '\n'.join(lines)
