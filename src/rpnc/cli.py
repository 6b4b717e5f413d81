from os import isatty, path
import sys
from argparse import ArgumentParser, REMAINDER
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory

from .interpreter import Interpreter
from .machine import Machine
from .util import RPNError, setup_logging


VERSION = '2.1.7'

log = logging.getLogger(__name__)


class InteractiveInput:
    '''
    Lines typed at a prompt_toolkit prompt, until EOF.
    '''

    def __init__(self, machine, history_file):
        self.machine = machine
        self.history_file = history_file

    def __iter__(self):
        session = PromptSession(message=self.machine.prompt,
                                completer=WordCompleter(
                                    self.machine.completions(),
                                    WORD=True),
                                history=FileHistory(
                                    path.expanduser(self.history_file)),
                                enable_history_search=True,
                                enable_suspend=True,
                                # Certainly not! But be explicit.
                                erase_when_done=False)
        while True:
            try:
                yield session.prompt()
            except EOFError:
                return


class CLI:
    '''
    Command line interface to RPN system.
    '''

    CONFIG_FILE = '~/.rpn.lua'
    HISTORY_FILE = '~/.rpn-history'

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            prog='rpnc',
            description='Reverse polish notation calculator',
            epilog='When a single operator is given, batch mode is enabled. '
                   'Use this only when working with stdin, e.g.: '
                   'echo "2 3 4 5" | rpnc +')
        self.argument_parser.add_argument('-b', '--batchmode',
                                          action='store_true',
                                          help='enable batch mode')
        self.argument_parser.add_argument('-d', '--debug',
                                          action='store_true',
                                          help='enable debug mode')
        self.argument_parser.add_argument('-s', '--show-stack',
                                          action='store_true',
                                          help='show last 5 items of the '
                                               'stack')
        self.argument_parser.add_argument('-i', '--intermediate',
                                          action='store_true',
                                          help='print intermediate results')
        self.argument_parser.add_argument('-c', '--config',
                                          default=self.CONFIG_FILE,
                                          help='load file containing Lua '
                                               'code')
        self.argument_parser.add_argument('-p', '--precision',
                                          type=int,
                                          default=Machine.DEFAULT_PRECISION,
                                          help='floating point number '
                                               'precision')
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        main_groups.add_argument('-m', '--manual',
                                 action='store_const',
                                 const=self.manual,
                                 dest='action',
                                 help='show manual')
        main_groups.add_argument('-v', '--version',
                                 action='store_const',
                                 const=self.version,
                                 dest='action',
                                 help='show version')
        self.argument_parser.add_argument('expressions',
                                          nargs=REMAINDER,
                                          help='operator or expression')
        self.argument_parser.set_defaults(action=self.executor)

    def version(self):
        print('This is rpnc version {}'.format(VERSION))
        return 0

    def manual(self):
        '''
        Page manual.
        '''
        Machine().manual()
        return 0

    def interpreter(self):
        '''
        Load Lua config, if there is one.
        '''
        config = path.expanduser(self.args.config)
        if not path.exists(config):
            log.debug('no config file %s', config)
            return None
        interpreter = Interpreter(config)
        log.debug('loaded config %s', config)
        return interpreter

    def machine(self):
        return Machine(batch=self.args.batchmode,
                       debug=self.args.debug,
                       showstack=self.args.show_stack,
                       intermediate=self.args.intermediate,
                       precision=self.args.precision,
                       interpreter=self.interpreter())

    def _interactive(self):
        return isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno())

    def executor(self):
        '''
        Run machine (RPN calculator).
        '''
        machine = self.machine()
        expressions = self.args.expressions
        if len(expressions) > 1:
            # rpnc 2 2 +
            machine.stdin = True
            failure = machine.evaluate(' '.join(expressions))
            return 0 if failure is None else 1

        if self._interactive():
            lines = InteractiveInput(machine, self.HISTORY_FILE)
        else:
            machine.stdin = True
            lines = sys.stdin
        for line in lines:
            machine.evaluate(line)
            if not machine.running:
                return 0

        if expressions:
            # echo 1 2 3 4 | rpnc +
            machine.set('batch', True)
            failure = machine.evaluate(expressions[0])
            return 0 if failure is None else 1
        return 0

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        setup_logging(self.args.debug)
        try:
            return self.args.action()
        except RPNError as e:
            print(e, file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            return 1


def main():
    sys.exit(CLI().run())
