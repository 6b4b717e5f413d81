'''
Management commands: everything that isn't math.

Each command is a plain function taking the Machine. Commands which modify
the stack back it up first, just like math functions do.
'''

from collections import namedtuple
from types import MappingProxyType

from .util import ArityError, DomainError, fmtnum, wrap_user_errors


Command = namedtuple('Command', 'help func')


def _toggle(flag):
    def toggle(machine):
        machine.toggle(flag)
    return toggle


def _disable(flag):
    def disable(machine):
        machine.set(flag, False)
    return disable


def dump(machine):
    print(*machine.stack.dump(debug=machine.debug), sep='\n')


def history(machine):
    for entry in machine.history:
        print(entry)


def show_vars(machine):
    if not machine.registers:
        print('no vars registered')
        return
    print('{:<20}     {}'.format('VARIABLE', 'VALUE'))
    for name, value in machine.registers.items():
        print('{:<20}  -> {}'.format(name, fmtnum(value, machine.precision)))


@wrap_user_errors('hex failed', error=DomainError)
def show_hex(machine):
    if not len(machine.stack):
        raise ArityError('stack empty')
    print('0x{:x}'.format(int(machine.stack.last()[0])))


def clear(machine):
    machine.stack.backup()
    machine.stack.clear()


def shift(machine):
    machine.stack.backup()
    machine.stack.shift()


def reverse(machine):
    machine.stack.backup()
    machine.stack.reverse()


def swap(machine):
    if len(machine.stack) < 2:
        raise ArityError("stack too small, can't swap")
    machine.stack.backup()
    machine.stack.swap()


def undo(machine):
    machine.stack.restore()


def dup(machine):
    if not len(machine.stack):
        raise ArityError('stack empty')
    machine.stack.backup()
    machine.stack.push(machine.stack.last()[0])


def edit(machine):
    machine.edit()


def stop(machine):
    machine.running = False


def manual(machine):
    machine.manual()


def _table(commands, aliases=None):
    for alias, name in (aliases or {}).items():
        commands[alias] = commands[name]
    return MappingProxyType(commands)


SETTINGS_COMMANDS = _table({
    'debug': Command('toggle debugging', _toggle('debug')),
    'nodebug': Command('disable debugging', _disable('debug')),
    'batch': Command('toggle batch mode', _toggle('batch')),
    'nobatch': Command('disable batch mode', _disable('batch')),
    'showstack': Command('toggle show last 5 items of the stack',
                         _toggle('showstack')),
    'noshowstack': Command('disable display of the stack',
                           _disable('showstack')),
    'intermediate': Command('toggle printing of intermediate results',
                            _toggle('intermediate')),
    'nointermediate': Command('disable printing of intermediate results',
                              _disable('intermediate')),
}, {
    'd': 'debug',
    'b': 'batch',
    's': 'showstack',
})

SHOW_COMMANDS = _table({
    'dump': Command('display the stack contents', dump),
    'history': Command('display calculation history', history),
    'vars': Command('show list of variables', show_vars),
    'hex': Command('show last stack item in hex form (converted to int)',
                   show_hex),
}, {
    'h': 'history',
    'p': 'dump',
    'v': 'vars',
})

STACK_COMMANDS = _table({
    'clear': Command('clear the whole stack', clear),
    'shift': Command('remove the last element of the stack', shift),
    'reverse': Command('reverse the stack elements', reverse),
    'swap': Command('exchange the last two elements', swap),
    'undo': Command('undo last operation', undo),
    'dup': Command('duplicate last stack item', dup),
    'edit': Command('edit the stack interactively', edit),
}, {
    'c': 'clear',
    'u': 'undo',
})

GENERAL_COMMANDS = _table({
    'exit': Command('exit program', stop),
    'manual': Command('show manual', manual),
}, {
    'quit': 'exit',
})

# Heading and table, in help order.
TABLES = (
    ('Configuration commands', SETTINGS_COMMANDS),
    ('Show commands', SHOW_COMMANDS),
    ('Stack manipulation commands', STACK_COMMANDS),
    ('Other commands', GENERAL_COMMANDS),
)

COMMANDS = MappingProxyType({
    name: command
    for _, table in TABLES
    for name, command in table.items()
})
