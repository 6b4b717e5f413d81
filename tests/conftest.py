from pytest import fixture

from rpnc.machine import Machine
from rpnc.stack import Stack


EXAMPLE_SCRIPT = '''\
-- simple function, return the lower number of the two operands
function lower(a,b)
    if a < b then
        return a
    else
        return b
    end
end

-- parallel resistance: 1/( (1/R1) + (1/R2) + ...)
-- batch function, gets the whole stack as a table
function parallelresistance(list)
    local sumres = 0

    for i, value in ipairs(list) do
        sumres = sumres + 1 / value
    end

    return 1 / sumres
end

function inch2centimeter(inches)
    return inches * 2.54
end

function broken(a)
    error("broken on purpose")
end

function notanumber(a)
    return "foo"
end

function init()
    register("lower", 2, "lower")
    register("parallelresistance", -1, "parallel resistance")
    -- leaves its argument on the stack
    register("inch2centimeter", 0)
    register("broken", 1, "always fails")
    register("notanumber", 1, "returns a string")
end
'''


@fixture
def stack():
    return Stack()


@fixture
def machine():
    '''
    Machine which prints results without the "= " prefix.
    '''
    return Machine(stdin=True)


@fixture
def batch_machine():
    return Machine(stdin=True, batch=True)


@fixture
def example_script(tmp_path):
    '''
    Path of a Lua config with one function per calling convention.
    '''
    script = tmp_path / 'rpn.lua'
    script.write_text(EXAMPLE_SCRIPT)
    return str(script)
