from tempfile import NamedTemporaryFile
from shutil import which
import subprocess
import os


HEADER = '''\
# add or remove numbers as you wish.
# each number must be on its own line.
# numbers must be floating point formatted.
'''

DEFAULT_EDITOR = 'vi'


def _editor():
    '''
    $EDITOR if it can be found, else vi.
    '''
    editor = os.environ.get('EDITOR')
    if editor and which(editor):
        return editor
    return DEFAULT_EDITOR


def edit_numbers(numbers):
    '''
    Let the user edit numbers in their editor, return the edited lines.

    Blocks until the editor exits. Raises OSError or CalledProcessError if
    the editor can't be run.
    '''
    with NamedTemporaryFile('w', prefix='stack', suffix='.txt',
                            delete=False) as tmp:
        tmp.write(HEADER)
        for number in numbers:
            tmp.write('{!r}\n'.format(number))
    try:
        subprocess.run([_editor(), tmp.name], check=True)
        with open(tmp.name) as fp:
            return fp.read().splitlines()
    finally:
        os.remove(tmp.name)
