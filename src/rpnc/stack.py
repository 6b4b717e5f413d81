from collections import deque
from threading import Lock
import logging

from .util import RPNError, UndoError


log = logging.getLogger(__name__)


class Stack:
    '''
    LIFO stack of floats with a single level of undo.

    The top of the stack is the right end of the deque. Every structural
    mutation bumps the revision, which is only there for diagnostics.

    Callers are expected to call backup() before mutating, restore() then
    brings back the state from just before that mutation. Mutators hold a
    lock, but a stack belongs to exactly one Machine and is only ever driven
    from one thread.
    '''

    def __init__(self):
        self.items = deque()
        self.backup_items = deque()
        self.rev = 0
        self.backuprev = None
        self._lock = Lock()

    def _debug(self, msg, *args):
        log.debug('(%03d) ' + msg, self.rev, *args)

    def _bump(self):
        self.rev += 1

    def __len__(self):
        return len(self.items)

    def push(self, item):
        '''
        Put item on top of the stack.
        '''
        with self._lock:
            self._debug('     push to stack: %.2f', item)
            self._bump()
            self.items.append(float(item))

    def pop(self):
        '''
        Remove and return the top of the stack, 0.0 if empty.
        '''
        with self._lock:
            if not self.items:
                return 0.0
            value = self.items.pop()
            self._debug(' remove from stack: %.2f', value)
            self._bump()
            return value

    def shift(self, n=1):
        '''
        Drop the n topmost elements, or as many as there are.
        '''
        with self._lock:
            for _ in range(min(n, len(self.items))):
                value = self.items.pop()
                self._debug('remove from stack: %.2f', value)
            self._bump()

    def last(self, n=1):
        '''
        Return the n topmost elements, oldest first, without removing them.
        '''
        if n <= 0:
            return []
        return list(self.items)[-n:]

    def all(self):
        '''
        Return every element, bottom to top, without removing them.
        '''
        return list(self.items)

    def swap(self):
        '''
        Exchange the two topmost elements.
        '''
        with self._lock:
            if len(self.items) < 2:
                raise RPNError("stack too small, can't swap")
            top = self.items.pop()
            below = self.items.pop()
            self._debug('swapping %.2f with %.2f', below, top)
            self.items.extend((top, below))
            self._bump()

    def reverse(self):
        with self._lock:
            self.items.reverse()
            self._bump()

    def clear(self):
        with self._lock:
            self._debug('clearing stack')
            self.items.clear()
            self._bump()

    def replace(self, items):
        '''
        Swap in entirely new contents, bottom to top.
        '''
        with self._lock:
            self.items = deque(float(item) for item in items)
            self._bump()

    def backup(self):
        '''
        Snapshot the current contents and revision for restore().
        '''
        with self._lock:
            self._debug('backing up %d items from rev %d',
                        len(self.items), self.rev)
            self.backup_items = deque(self.items)
            self.backuprev = self.rev

    def restore(self):
        '''
        Go back to the last backup.
        '''
        with self._lock:
            if self.backuprev is None:
                raise UndoError('nothing to undo')
            self._debug('restoring stack to revision %d', self.backuprev)
            self.items = deque(self.backup_items)
            self.rev = self.backuprev

    def dump(self, debug=False):
        '''
        Return printable lines of the stack, plus the backup if debugging.
        '''
        lines = ['Stack revision {}:'.format(self.rev)]
        lines.extend(repr(item) for item in self.items)
        if debug:
            lines.append('Backup stack revision {}:'.format(self.backuprev))
            lines.extend(repr(item) for item in self.backup_items)
        return lines
