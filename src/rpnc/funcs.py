'''
Built-in operators, functions and constants.

Every callable is wrapped in a Function which knows how many arguments it
wants from the stack. Arguments are passed as one list, oldest (deepest)
first, so for "10 2 /" the function sees [10, 2].
'''

from statistics import NormalDist
from types import MappingProxyType
import operator
import math

from scipy import special

from .util import DomainError, wrap_user_errors


# Take the whole stack
BATCH = -1


class Function:
    '''
    Built-in function.

    :param func: Callable taking a list of exactly expectargs floats.
    :param expectargs: How many stack elements to hand over, BATCH for all.
    :param help: One line description.
    '''

    def __init__(self, func, expectargs=2, help=''):
        self.func = func
        self.expectargs = expectargs
        self.help = help
        self.name = None

    def __repr__(self):
        return '<Function {} ({})>'.format(self.name, self.expectargs)

    @wrap_user_errors('{0.name} failed', error=DomainError)
    def __call__(self, args):
        return float(self.func(args))


def _unary(f, help=''):
    return Function(lambda args: f(args[0]), 1, help)


def _binary(f, help=''):
    return Function(lambda args: f(args[0], args[1]), 2, help)


def _batch(f, help=''):
    return Function(f, BATCH, help)


def _divide(left, right):
    if right == 0:
        raise DomainError('division by null')
    return left / right


def _shift_amount(n):
    n = int(n)
    if n < 0:
        raise DomainError('negative shift amount')
    if n >= 64:
        raise DomainError('shift amount too large')
    return n


def _lshift(left, right):
    return int(left) << _shift_amount(right)


def _rshift(left, right):
    return int(left) >> _shift_amount(right)


def _percent_diff(left, right):
    '''
    Percent change from left to right.
    '''
    if left == 0:
        raise DomainError('percent difference of null')
    return (right - left) / left * 100


def _erfinv(x):
    return NormalDist().inv_cdf((x + 1) / 2) / math.sqrt(2)


def _exponent(x):
    if x == 0:
        raise ValueError('math domain error')
    return math.frexp(x)[1] - 1


def _round(x):
    '''
    Round half away from zero.
    '''
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _median(args):
    # Index into the stack as is. Deliberately unsorted.
    return args[len(args) // 2]


def _register(table, aliases):
    for name, function in table.items():
        function.name = name
    for alias, name in aliases.items():
        table[alias] = table[name]
    return MappingProxyType(table)


FUNCTIONS = _register({
    # Basic
    '+': _binary(operator.__add__, 'add'),
    '-': _binary(operator.__sub__, 'subtract'),
    'x': _binary(operator.__mul__, 'multiply (alias: *)'),
    '/': _binary(_divide, 'divide'),
    '^': _binary(math.pow, 'power'),

    # Percent
    '%': _binary(lambda a, b: a / 100 * b, 'percent'),
    '%-': _binary(lambda a, b: a - a / 100 * b, 'subtract percent'),
    '%+': _binary(lambda a, b: a + a / 100 * b, 'add percent'),
    '%d': _binary(_percent_diff, 'percent difference'),

    # Bitwise, on truncated integers
    'and': _binary(lambda a, b: int(a) & int(b), 'bitwise and'),
    'or': _binary(lambda a, b: int(a) | int(b), 'bitwise or'),
    'xor': _binary(lambda a, b: int(a) ^ int(b), 'bitwise xor'),
    '<': _binary(_lshift, 'left shift'),
    '>': _binary(_rshift, 'right shift'),

    # Math
    'mod': _binary(math.remainder,
                   'remainder of division (alias: remainder)'),
    'sqrt': _unary(math.sqrt, 'square root'),
    'abs': _unary(math.fabs, 'absolute value'),
    'acos': _unary(math.acos, 'arc cosine'),
    'acosh': _unary(math.acosh, 'inverse hyperbolic cosine'),
    'asin': _unary(math.asin, 'arc sine'),
    'asinh': _unary(math.asinh, 'inverse hyperbolic sine'),
    'atan': _unary(math.atan, 'arc tangent'),
    'atan2': _binary(math.atan2, 'arc tangent of y/x'),
    'atanh': _unary(math.atanh, 'inverse hyperbolic tangent'),
    'cbrt': _unary(math.cbrt, 'cube root'),
    'ceil': _unary(math.ceil, 'round up'),
    'cos': _unary(math.cos, 'cosine'),
    'cosh': _unary(math.cosh, 'hyperbolic cosine'),
    'erf': _unary(math.erf, 'error function'),
    'erfc': _unary(math.erfc, 'complementary error function'),
    'erfcinv': _unary(lambda x: _erfinv(1 - x),
                      'inverse complementary error function'),
    'erfinv': _unary(_erfinv, 'inverse error function'),
    'exp': _unary(math.exp, 'e^x'),
    'exp2': _unary(math.exp2, '2^x'),
    'expm1': _unary(math.expm1, 'e^x - 1'),
    'floor': _unary(math.floor, 'round down'),
    'gamma': _unary(math.gamma, 'gamma function'),
    'ilogb': _unary(_exponent, 'binary exponent as integer'),
    'log': _unary(math.log, 'natural logarithm'),
    'log10': _unary(math.log10, 'decimal logarithm'),
    'log1p': _unary(math.log1p, 'natural logarithm of 1 + x'),
    'log2': _unary(math.log2, 'binary logarithm'),
    'logb': _unary(_exponent, 'binary exponent'),
    'pow': _binary(math.pow, 'power'),
    'round': _unary(_round, 'round half away from zero'),
    'roundtoeven': _unary(round, 'round half to even'),
    'sin': _unary(math.sin, 'sine'),
    'sinh': _unary(math.sinh, 'hyperbolic sine'),
    'tan': _unary(math.tan, 'tangent'),
    'tanh': _unary(math.tanh, 'hyperbolic tangent'),
    'trunc': _unary(math.trunc, 'integer part'),
    'copysign': _binary(math.copysign, 'magnitude of x, sign of y'),
    'dim': _binary(lambda a, b: max(a - b, 0), 'positive difference'),
    'hypot': _binary(math.hypot, 'hypotenuse'),
    'j0': _unary(special.j0, 'Bessel function of the first kind, order 0'),
    'j1': _unary(special.j1, 'Bessel function of the first kind, order 1'),
    'y0': _unary(special.y0, 'Bessel function of the second kind, order 0'),
    'y1': _unary(special.y1, 'Bessel function of the second kind, order 1'),

    # Converters
    'cm-to-inch': _unary(lambda x: x / 2.54, 'centimeters to inches'),
    'inch-to-cm': _unary(lambda x: x * 2.54, 'inches to centimeters'),
    'gallons-to-liters': _unary(lambda x: x * 3.785, 'gallons to liters'),
    'liters-to-gallons': _unary(lambda x: x / 3.785, 'liters to gallons'),
    'yards-to-meters': _unary(lambda x: x * 0.9144, 'yards to meters'),
    'meters-to-yards': _unary(lambda x: x / 0.9144, 'meters to yards'),
    'miles-to-kilometers': _unary(lambda x: x * 1.609,
                                  'miles to kilometers'),
    'kilometers-to-miles': _unary(lambda x: x / 1.609,
                                  'kilometers to miles'),
}, {
    '*': 'x',
    'remainder': 'mod',
})

BATCH_FUNCTIONS = _register({
    'sum': _batch(sum, 'sum of all values (alias: +)'),
    'min': _batch(min, 'min of all values'),
    'max': _batch(max, 'max of all values'),
    'mean': _batch(lambda args: sum(args) / len(args),
                   'mean of all values (alias: avg)'),
    'median': _batch(_median, 'median of all values'),
}, {
    '+': 'sum',
    'avg': 'mean',
})

_PHI = (1 + math.sqrt(5)) / 2

CONSTANTS = MappingProxyType({
    'Pi': math.pi,
    'Phi': _PHI,
    'Sqrt2': math.sqrt(2),
    'SqrtE': math.sqrt(math.e),
    'SqrtPi': math.sqrt(math.pi),
    'SqrtPhi': math.sqrt(_PHI),
    'Ln2': math.log(2),
    'Log2E': 1 / math.log(2),
    'Ln10': math.log(10),
    'Log10E': 1 / math.log(10),
})
