#!/usr/bin/env python3

"""
APRS symbol handling.
"""

from enum import Enum

from ..errors import InvalidField


PRI_SYMBOL = "/"
SEC_SYMBOL = "\\"


class APRSSymbolTable(Enum):
    PRIMARY = PRI_SYMBOL
    SECONDARY = SEC_SYMBOL


def is_printable(char):
    """
    True if char is a single printable ASCII character.
    """
    return (len(char) == 1) and (0x21 <= ord(char) <= 0x7e)


class APRSSymbol(object):
    """
    Representation of an APRS symbol: a table identifier and a symbol code.
    """
    def __init__(self, table, symbol):
        try:
            table = APRSSymbolTable(table)
        except ValueError:
            raise InvalidField('Invalid symbol table %r' % (table,))

        if not is_printable(symbol):
            raise InvalidField('Invalid symbol code %r' % (symbol,))

        self.table = table
        self.symbol = symbol

    def __repr__(self): # pragma: no cover
        return (
                '%s(table=%r, symbol=%r)' \
                    % (
                        self.__class__.__name__,
                        self.table,
                        self.symbol
                    )
        )

    def __eq__(self, other):
        if not isinstance(other, APRSSymbol):
            return NotImplemented
        return (self.table, self.symbol) == (other.table, other.symbol)

    def __hash__(self):
        return hash((self.table, self.symbol))

    def __str__(self):
        return self.tableident + self.symbol

    @property
    def tableident(self):
        """
        Return the table identifier character
        """
        return self.table.value
