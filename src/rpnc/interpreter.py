'''
User defined functions, written in Lua.

The script is run in a stripped down Lua runtime: no io, os, module loading,
debug library or access to Python objects. It has to define init(), which
calls register(name, numargs, help) for every function it wants to expose.

numargs is the number of stack elements the function wants:

- 0: the top of the stack, which stays on the stack.
- 1..n: that many elements, which get replaced by the result.
- -1: the whole stack, passed as one table.
'''

from collections import namedtuple
import logging

from lupa import LuaRuntime

from .util import ExtensionError, NameLookupError


log = logging.getLogger(__name__)

LuaFunction = namedtuple('LuaFunction', 'name numargs help')


def _deny(obj, attr_name, is_setting):
    raise AttributeError('access to {} denied'.format(attr_name))


class Interpreter:
    '''
    Extension bridge to a sandboxed Lua runtime.
    '''

    # Globals a calculator script has no business with.
    FORBIDDEN = ('io', 'os', 'package', 'require', 'dofile', 'loadfile',
                 'load', 'debug', 'python')

    def __init__(self, script=None):
        '''
        Create runtime. Loads script, if given.

        :param script: Path to Lua script.
        '''
        self.script = script
        self.functions = dict()
        self.runtime = LuaRuntime(register_eval=False,
                                  register_builtins=False,
                                  unpack_returned_tuples=True,
                                  attribute_filter=_deny)
        lua_globals = self.runtime.globals()
        for name in type(self).FORBIDDEN:
            lua_globals[name] = None
        lua_globals['register'] = self.register
        if script is not None:
            try:
                with open(script) as fp:
                    source = fp.read()
            except (OSError, UnicodeDecodeError) as e:
                raise ExtensionError('failed to read lua code: {}'.format(
                    e)) from e
            self.load(source)

    def load(self, source):
        '''
        Run Lua source, then its init().
        '''
        try:
            self.runtime.execute(source)
        except Exception as e:
            raise ExtensionError('failed to load lua code: {}'.format(e)) \
                from e
        init = self.runtime.globals()['init']
        if init is None:
            raise ExtensionError('lua code does not define init()')
        try:
            init()
        except Exception as e:
            raise ExtensionError('failed to run init(): {}'.format(e)) from e
        log.debug('registered lua functions: %s', ', '.join(self.functions))

    def register(self, name, numargs, help=None):
        '''
        Called from Lua.
        '''
        self.functions[str(name)] = LuaFunction(str(name), int(numargs),
                                                help or '')

    def names(self):
        return sorted(self.functions)

    def __contains__(self, name):
        return name in self.functions

    def _lookup(self, name):
        try:
            return self.functions[name]
        except KeyError:
            raise NameLookupError('no such lua function: {}'.format(name)) \
                from None

    def declared_arity(self, name):
        return self._lookup(name).numargs

    def help(self, name):
        return self._lookup(name).help

    def invoke(self, name, items):
        '''
        Call Lua function name with stack items, return its number.

        For numargs 0 and 1 only the first item is passed, for -1 all items
        are passed as one table.
        '''
        numargs = self._lookup(name).numargs
        log.debug('calling lua func %s() with %d args', name, numargs)
        function = self.runtime.globals()[name]
        if function is None:
            raise ExtensionError('lua function {} is not defined'.format(name))
        if numargs == -1:
            args = [self.runtime.table(*items)]
        elif numargs == 0:
            args = items[:1]
        else:
            args = items
        try:
            result = function(*args)
        except Exception as e:
            # Python errors, e.g. denied attribute access, come back as is
            raise ExtensionError('failed to exec lua func {}: {}'.format(
                name, e)) from e
        if isinstance(result, bool) or not isinstance(result, (int, float)):
            raise ExtensionError(
                'lua func {} did not return a number'.format(name))
        return float(result)
