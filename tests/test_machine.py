'''
Evaluator tests
'''

import logging

from rpnc.machine import Machine
from rpnc.util import (RPNError, ArityError, DomainError, NameLookupError,
                       ExtensionError)

from pytest import approx, mark


class FakeInterpreter:
    '''
    Stands in for the Lua interpreter.
    '''

    def __init__(self, **functions):
        self.functions = functions
        self.calls = []

    def names(self):
        return sorted(self.functions)

    def declared_arity(self, name):
        return self.functions[name][0]

    def help(self, name):
        return 'help for ' + name

    def invoke(self, name, items):
        self.calls.append((name, items))
        return self.functions[name][1](items)


def fail(items):
    raise ExtensionError('failed to exec lua func')


@mark.parametrize('line,expected', [
    ('15 15 +', [30]),
    ('4 2 ^', [16]),
    ('100 50 -', [50]),
    ('4 4 x', [16]),
    ('10 2 /', [5]),
    ('2 16 swap /', [8]),
    ('10 >TEN clear 5 <TEN *', [50]),
    ('400 20 %-', [320]),
    ('100 500 reverse -', [400]),
    ('4 4 + undo *', [16]),
    ('9 2 mod', [1]),
    ('0x10 1:30 +', [17.5]),
    ('3 dup x', [9]),
    ('1 2 3 shift', [1, 2]),
])
def test_calc(machine, line, expected):
    assert machine.evaluate(line) is None
    assert machine.stack.all() == expected


def test_constants(machine):
    machine.evaluate('Pi 2 *')
    assert machine.stack.all() == [approx(6.283185307179586)]


@mark.parametrize('line,expected', [
    ('1 2 3 4 5 median', [3]),
    ('2 2 2 2 sum', [8]),
    ('2 2 2 2 +', [8]),
    ('2 2 8 2 2 mean', [approx(3.2)]),
    ('1 2 3 4 5 min', [1]),
    ('1 2 3 4 5 max', [5]),
    ('1 1 1 1 1 clear 1 1 sum', [2]),
])
def test_batch(batch_machine, line, expected):
    assert batch_machine.evaluate(line) is None
    assert batch_machine.stack.all() == expected


def test_batch_only_outside_batch_mode(machine, capsys):
    failure = machine.evaluate('1 2 median')
    assert isinstance(failure, RPNError)
    assert 'only supported in batch mode' in str(failure)
    assert machine.stack.all() == [1, 2]


def test_batch_on_empty_stack(batch_machine):
    assert isinstance(batch_machine.evaluate('sum'), ArityError)
    assert batch_machine.stack.all() == []


def test_division_by_zero_leaves_stack(machine, capsys):
    failure = machine.evaluate('5 0 /')
    assert isinstance(failure, DomainError)
    assert machine.stack.all() == [5, 0]
    assert 'division by null' in capsys.readouterr().err


def test_failure_does_not_touch_backup(machine):
    machine.evaluate('5 0 / undo')
    # undo reverts the push of 0, not the failed division
    assert machine.stack.all() == [5]


def test_not_enough_arguments(machine):
    assert isinstance(machine.evaluate('1 +'), ArityError)
    assert machine.stack.all() == [1]


def test_unknown_token_continues(machine, capsys):
    failure = machine.evaluate('1 foo 2 +')
    assert isinstance(failure, NameLookupError)
    assert machine.stack.all() == [3]
    assert 'unknown command or operator' in capsys.readouterr().err


def test_unknown_variable(machine):
    failure = machine.evaluate('<NOPE')
    assert isinstance(failure, NameLookupError)
    assert "doesn't exist" in str(failure)


def test_store_keeps_stack(machine):
    machine.evaluate('7 >SEVEN')
    assert machine.stack.all() == [7]
    assert machine.registers == {'SEVEN': 7}


def test_store_on_empty_stack(machine):
    assert isinstance(machine.evaluate('>X'), ArityError)


def test_undo_without_backup(machine):
    assert machine.evaluate('undo') is not None
    assert machine.stack.all() == []


def test_history(machine):
    machine.evaluate('15 15 + 3 /')
    assert machine.history == ['15 15 + -> 30', '30 3 / -> 10']


def test_result_printing(capsys):
    machine = Machine()
    machine.evaluate('10 3 /')
    assert capsys.readouterr().out == '= 3.33\n'


def test_result_printing_stdin(machine, capsys):
    machine.evaluate('1 2 + 3 +')
    assert capsys.readouterr().out == '6\n'


def test_intermediate_results(capsys):
    machine = Machine(stdin=True, intermediate=True)
    machine.evaluate('1 2 + 3 +')
    assert capsys.readouterr().out == '3\n6\n'


def test_precision(capsys):
    machine = Machine(stdin=True, precision=4)
    machine.evaluate('2 3 /')
    assert capsys.readouterr().out == '0.6667\n'


def test_numbers_print_nothing(machine, capsys):
    machine.evaluate('1 2 3')
    assert capsys.readouterr().out == ''


def test_showstack(capsys):
    machine = Machine(showstack=True)
    machine.evaluate('1 2 3 4 5 6')
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == '…'
    assert [line.strip() for line in lines[1:]] == ['2', '3', '4', '5', '6']


def test_showstack_not_when_piped(capsys):
    machine = Machine(showstack=True, stdin=True)
    machine.evaluate('1 2')
    assert capsys.readouterr().out == ''


def test_toggles(machine, capsys):
    machine.evaluate('batch')
    assert machine.batch
    assert 'batch set to True' in capsys.readouterr().out
    machine.evaluate('nobatch')
    assert not machine.batch
    machine.evaluate('b b')
    assert not machine.batch


def test_debug_logs(machine, caplog):
    caplog.set_level(logging.DEBUG, logger='rpnc')
    machine.evaluate('debug 1 2 +')
    assert machine.debug
    assert 'push to stack' in caplog.text
    machine.evaluate('nodebug')
    assert not machine.debug


def test_quit_stops_evaluation(machine):
    machine.evaluate('1 quit 2')
    assert not machine.running
    assert machine.stack.all() == [1]


def test_help(machine, capsys):
    machine.evaluate('?')
    out = capsys.readouterr().out
    assert 'clear|c' in out
    assert 'median' in out
    assert 'Sqrt2' in out


def test_edit(capsys):
    seen = []

    def editor(numbers):
        seen.extend(numbers)
        return ['# a comment', '1', '', 'foo', '2.5  # inline']
    machine = Machine(stdin=True, editor=editor)
    machine.evaluate('3 4 edit')
    assert seen == [3, 4]
    assert machine.stack.all() == [1, 2.5]
    assert 'foo is not a floating point number!' in capsys.readouterr().err
    machine.evaluate('undo')
    assert machine.stack.all() == [3, 4]


def test_edit_empty_stack(machine):
    assert isinstance(machine.evaluate('edit'), ArityError)


def test_editor_failure(capsys):
    def editor(numbers):
        raise OSError('no vi')
    machine = Machine(stdin=True, editor=editor)
    failure = machine.evaluate('1 edit')
    assert 'could not run editor command' in str(failure)
    assert machine.stack.all() == [1]


def test_extension_two_args():
    interpreter = FakeInterpreter(lower=(2, min))
    machine = Machine(stdin=True, interpreter=interpreter)
    machine.evaluate('9 5 6 lower')
    assert interpreter.calls == [('lower', [5, 6])]
    assert machine.stack.all() == [9, 5]


def test_extension_inspect_only():
    interpreter = FakeInterpreter(half=(0, lambda items: items[0] / 2))
    machine = Machine(stdin=True, interpreter=interpreter)
    machine.evaluate('4 half')
    assert machine.stack.all() == [4, 2]


def test_extension_batch():
    interpreter = FakeInterpreter(total=(-1, sum))
    machine = Machine(stdin=True, interpreter=interpreter)
    machine.evaluate('1 2 3 total')
    assert interpreter.calls == [('total', [1, 2, 3])]
    assert machine.stack.all() == [6]


def test_extension_failure_leaves_stack():
    interpreter = FakeInterpreter(broken=(1, fail))
    machine = Machine(stdin=True, interpreter=interpreter)
    failure = machine.evaluate('1 broken')
    assert isinstance(failure, ExtensionError)
    assert machine.stack.all() == [1]


def test_extension_not_enough_arguments():
    interpreter = FakeInterpreter(lower=(2, min))
    machine = Machine(stdin=True, interpreter=interpreter)
    assert isinstance(machine.evaluate('1 lower'), ArityError)
    assert interpreter.calls == []


def test_extension_help():
    interpreter = FakeInterpreter(lower=(2, min))
    machine = Machine(interpreter=interpreter)
    assert 'help for lower' in machine.render_help()
    assert 'lower' in machine.completions()


def test_builtins_shadow_extensions():
    interpreter = FakeInterpreter(sqrt=(1, lambda items: -1))
    machine = Machine(stdin=True, interpreter=interpreter)
    machine.evaluate('16 sqrt')
    assert machine.stack.all() == [4]


def test_prompt(machine):
    assert machine.prompt() == 'rpn [0]» '
    machine.evaluate('1 batch debug')
    assert machine.prompt() == 'rpn->batch->debug [1/rev1]» '
    machine.evaluate('nodebug')
