""" CALC - single line integer calculator """
import argparse
import sys
from enum import Enum

INT64_MAX = 2 ** 63 - 1
INT64_MIN = -2 ** 63

BASE = 10
DIGITS = '0123456789'
LINE_END = '\n'


class ErrorCode(Enum):
    UNEXPECTED_CHAR = 'Unexpected character'
    UNEXPECTED_END = 'Unexpected end of input'
    BAD_FACTOR = 'bad factor'
    TRAILING_INPUT = 'Unconsumed input'
    INTEGER_OVERFLOW = 'Integer overflow'
    DIVISION_BY_ZERO = 'Division by zero'
    NO_INPUT = 'No input'


class Error(Exception):
    def __init__(self, error_code=None, index=None, message=None):
        self.error_code = error_code
        # 0-based offset into the input line
        self.index = index
        self.message = f'{self.__class__.__name__}: {message}'
        super().__init__(self.message)


class CalcSyntaxError(Error):
    def __init__(self, error_code=None, index=None, expected=None, message=None):
        self.expected = expected
        super().__init__(error_code=error_code, index=index, message=message)


class CalcOverflowError(Error):
    pass


class CalcArithmeticError(Error):
    pass


class InputError(Error):
    pass


###############################################################################
#                                                                             #
#  EVALUATOR                                                                  #
#                                                                             #
###############################################################################

class Evaluator(object):
    def __init__(self, text, trace=None):
        # client string input, e.g. "2+3*4\n"
        self.text = text
        # self.pos is the index of the NEXT char to read
        self.pos = 0
        # optional diagnostic sink, e.g. print
        self.trace = trace

    def log(self, msg):
        if self.trace is not None:
            self.trace(msg)

    def error(self, error_code, expected=None):
        if expected is not None:
            message = f'error matching {expected!r} at index {self.pos}'
        else:
            message = f'{error_code.value} at index {self.pos}'
        raise CalcSyntaxError(
            error_code=error_code,
            index=self.pos,
            expected=expected,
            message=message,
        )

    def overflow(self):
        raise CalcOverflowError(
            error_code=ErrorCode.INTEGER_OVERFLOW,
            index=self.pos,
            message=f'{ErrorCode.INTEGER_OVERFLOW.value} at index {self.pos}',
        )

    def check_range(self, value):
        if not INT64_MIN <= value <= INT64_MAX:
            self.overflow()
        return value

    def peek(self):
        """Return the next unread character without advancing."""
        if self.pos > len(self.text) - 1:
            self.error(ErrorCode.UNEXPECTED_END)
        return self.text[self.pos]

    def match(self, expected):
        if self.peek() == expected:
            self.pos += 1
        else:
            self.error(ErrorCode.UNEXPECTED_CHAR, expected=expected)

    def scan_digits(self):
        """Fold a run of decimal digits into an integer.

        Stops at the first non-digit without consuming it. An empty run
        yields 0; the leading sign is left to the caller.
        """
        value = 0
        while self.pos < len(self.text) and self.text[self.pos] in DIGITS:
            digit = DIGITS.index(self.text[self.pos])
            if value > (INT64_MAX - digit) // BASE:
                self.overflow()
            value = value * BASE + digit
            self.pos += 1
        return value

    def factor(self):
        """factor : ['+' | '-'] DIGIT+ | LPAREN expr RPAREN"""
        self.log(f'ENTER: factor at {self.pos}')
        char = self.peek()
        if char == '(':
            self.match('(')
            value = self.expr()
            self.match(')')
        elif char in DIGITS or char in '+-':
            if char in '+-':
                self.match(char)
            start = self.pos
            value = self.scan_digits()
            if self.pos == start:
                # a sign must be followed by at least one digit
                self.error(ErrorCode.BAD_FACTOR)
            if char == '-':
                value = -value
        else:
            self.error(ErrorCode.BAD_FACTOR)

        self.log(f'LEAVE: factor = {value}')
        return value

    def term(self):
        """term : factor ((MUL | DIV) factor)*"""
        self.log(f'ENTER: term at {self.pos}')
        value = self.factor()

        while self.peek() in '*/':
            char = self.peek()
            self.match(char)
            if char == '*':
                value = self.check_range(value * self.factor())
            elif char == '/':
                value = self.check_range(self.divide(value, self.factor()))

        self.log(f'LEAVE: term = {value}')
        return value

    def expr(self):
        """
        expr   : term ((PLUS | MINUS) term)?
        term   : factor ((MUL | DIV) factor)*
        factor : ['+' | '-'] DIGIT+ | LPAREN expr RPAREN

        Only one trailing PLUS/MINUS term is combined; "1+2+3" stops
        after "1+2" and leaves "+3" unread.
        """
        self.log(f'ENTER: expr at {self.pos}')
        value = self.term()

        char = self.peek()
        if char == '+':
            self.match('+')
            value = self.check_range(value + self.term())
        elif char == '-':
            self.match('-')
            value = self.check_range(value - self.term())

        self.log(f'LEAVE: expr = {value}')
        return value

    def divide(self, left, right):
        if right == 0:
            raise CalcArithmeticError(
                error_code=ErrorCode.DIVISION_BY_ZERO,
                index=self.pos,
                message=f'{ErrorCode.DIVISION_BY_ZERO.value} at index {self.pos}',
            )
        # truncate toward zero, unlike floor division
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient
        return quotient

    def evaluate(self, strict=False):
        self.pos = 0
        value = self.expr()
        if strict and self.text[self.pos:].rstrip('\r\n'):
            self.error(ErrorCode.TRAILING_INPUT)
        return value


def evaluate(text, strict=False, trace=None):
    """Evaluate one line of arithmetic and return its integer value."""
    if not text.endswith(LINE_END):
        text += LINE_END
    return Evaluator(text, trace=trace).evaluate(strict=strict)


def read_line(stream):
    line = stream.readline()
    if not line:
        raise InputError(
            error_code=ErrorCode.NO_INPUT,
            message='no expression to read',
        )
    return line


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='CALC - single line integer calculator'
    )
    parser.add_argument(
        'expression',
        nargs='?',
        help='Expression to evaluate (read from stdin when omitted)',
    )
    parser.add_argument(
        '--strict',
        help='Reject input left over after the expression',
        action='store_true',
    )
    parser.add_argument(
        '--trace',
        help='Print grammar rule information',
        action='store_true',
    )
    args = parser.parse_args(argv)

    def trace(msg):
        print(msg, file=sys.stderr)

    try:
        if args.expression is None:
            print('expr:\n\t', end='', flush=True)
            text = read_line(sys.stdin)
        else:
            text = args.expression
        result = evaluate(
            text,
            strict=args.strict,
            trace=trace if args.trace else None,
        )
    except Error as e:
        print(f'fatal: {e.message}', file=sys.stderr)
        sys.exit(1)

    print(f'result: {result}')


if __name__ == '__main__':
    main()
