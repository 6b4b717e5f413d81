MANUAL = '''\
NAME
    rpnc - Programmable command-line calculator using reverse polish notation

SYNOPSIS
    rpnc [-bdsimvh] [-c <file>] [-p <int>] [<operator> | <expression>...]

    -b, --batchmode       enable batch mode
    -d, --debug           enable debug mode
    -s, --show-stack      show last 5 items of the stack
    -i, --intermediate    print intermediate results
    -m, --manual          show manual
    -c, --config <file>   load <file> containing Lua code
    -p, --precision <int> floating point number precision (default 2)
    -v, --version         show version
    -h, --help            show help

    When a single <operator> is given and input comes from stdin, batch
    mode is enabled automatically: echo "2 3 4 5" | rpnc +

DESCRIPTION
    Numbers go onto the stack. Operators and functions take their operands
    from the top of the stack and put the result back:

        | input | stack  | calculation   |
        |-------|--------|---------------|
        |    80 | 80     |               |
        |    20 | 80 20  |               |
        |     + | 100    | 80 + 20 = 100 |
        |     2 | 100 2  |               |
        |     / | 50     | 100 / 2 = 50  |

    Without arguments and with a terminal, rpnc starts an interactive
    prompt. Input piped into rpnc is evaluated line by line. Several
    arguments are evaluated as one expression: rpnc 2 2 +

    Numbers may be integers, floating point numbers (with optional _
    thousands separators and exponent), hex numbers prefixed with 0x, or
    times of day as HH:MM, which turn into fractional hours.

BATCH MODE
    In batch mode, functions from the batch table work on the whole stack,
    and + sums up everything: 2 2 2 2 + is 8. Toggle it with the batch
    command or -b.

STACK MANIPULATION
    undo goes back to the stack before the last operation, one level deep.
    dump shows the stack (and the undo backup when debugging), reverse
    reverses it, swap exchanges the last two elements, shift drops the
    last one, dup duplicates it, clear empties the stack, and edit opens
    the stack in $EDITOR.

VARIABLES
    >NAME puts the last stack element into variable NAME, leaving the
    stack alone. <NAME pushes it back onto the stack. Names start with an
    uppercase letter. vars lists all variables.

COMMENTS
    Everything after # is ignored: 123 # a comment

EXTENDING RPNC USING LUA
    rpnc loads ~/.rpn.lua, or the file given with -c. The file must define
    init(), which registers functions using register(name, numargs, help):

        function add(a, b)
          return a + b
        end

        function init()
          register("add", 2, "addition")
        end

    numargs is 0 (get the last stack element, but leave the stack alone),
    1 to n (replace that many elements by the result) or -1 (get the whole
    stack as a table, replace it by the result).

    Lua runs sandboxed: no io, os, module loading or debug library.

GETTING HELP
    Enter help or ? at the prompt for a list of all commands, operators
    and functions.
'''
