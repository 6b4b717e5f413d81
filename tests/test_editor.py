'''
External editor tests, using true(1) as the editor
'''

import math

from rpnc.editor import edit_numbers, HEADER


def test_unchanged(monkeypatch):
    monkeypatch.setenv('EDITOR', 'true')
    lines = edit_numbers([1.0, 2.5])
    assert lines == HEADER.splitlines() + ['1.0', '2.5']


def test_round_trip(monkeypatch):
    from rpnc.machine import Machine

    monkeypatch.setenv('EDITOR', 'true')
    machine = Machine(stdin=True)
    machine.evaluate('1 2.5 edit')
    assert machine.stack.all() == [1, 2.5]


def test_huge_lines_load_as_infinite():
    from rpnc.machine import Machine

    machine = Machine(stdin=True,
                      editor=lambda numbers: ['0x' + 'f' * 300,
                                              '9' * 400 + ':00',
                                              'bogus',
                                              '2'])
    assert machine.evaluate('1 edit') is None
    assert machine.stack.all() == [math.inf, math.inf, 2]


def test_huge_numbers_do_not_escape_evaluate():
    from rpnc.machine import Machine

    machine = Machine(stdin=True)
    assert machine.evaluate('0x' + 'f' * 300) is None
    assert machine.evaluate('9' * 400 + ':00') is None
    assert machine.stack.all() == [math.inf, math.inf]
