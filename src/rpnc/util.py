from functools import wraps
import logging


class RPNError(Exception):
    pass


class DomainError(RPNError):
    '''
    Math went wrong: division by zero, bad shift amount, sqrt(-1), etc.
    '''


class ArityError(RPNError):
    '''
    Not enough elements on the stack.
    '''


class NameLookupError(RPNError):
    '''
    Unknown token, variable or function.
    '''


class UndoError(RPNError):
    pass


class ExtensionError(RPNError):
    '''
    Lua function failed or didn't return a number.
    '''


def wrap_user_errors(fmt, error=RPNError):
    '''
    Ugly hack decorator that converts exceptions to user errors.

    Passes through RPNErrors. Everything else becomes an `error` whose
    message is fmt, formatted with the wrapped call's arguments, followed by
    the original exception.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except Exception as e:
                raise error('{}: {}'.format(fmt.format(*args, **kwargs),
                                            e)) from e
        return wrapper
    return decorator


def fmtnum(number, precision=2):
    '''
    Format number for display.

    Integral values lose their decimals, everything else gets precision
    decimals.
    '''
    try:
        integral = number == int(number)
    except (ValueError, OverflowError):
        # nan, inf
        integral = False
    if integral:
        return '{:.0f}'.format(number)
    return '{:.{}f}'.format(number, precision)


def list2str(numbers, precision=2):
    return ' '.join(fmtnum(number, precision) for number in numbers)


LOG_FORMAT = 'DEBUG(%(module)s): %(message)s'


def setup_logging(debug=False):
    '''
    Hook the rpnc logger up to stderr, once.
    '''
    log = logging.getLogger('rpnc')
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if debug else logging.WARNING)
    return log
