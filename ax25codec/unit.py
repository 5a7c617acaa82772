#!/usr/bin/env python3

"""
Unit handling, using `pint`.  Values are stored as plain numbers in each
field's native unit (knots, feet, kilometres...); accessors ending in `_q`
return them as `pint` quantities and constructors accept quantities in any
compatible unit.
"""

from pint import Quantity


def checknumeric(name, value, required=False):
    """
    Assert the value is a numeric value, or throw a ValueError.
    """
    if value is None:
        if required:
            raise ValueError("%s is a required parameter" % name)
        else:
            return None

    # This will throw ValueError if it can't be converted
    return float(value)


def convertvalue(name, quantity, units, required=False):
    """
    Assert the value is a numeric value and convert to the appropriate
    units if it is a quantity.
    """
    if (quantity is not None) and isinstance(quantity, Quantity):
        # Convert to target units, take the magnitude
        return quantity.to(units).magnitude
    else:
        # Pass through to handler
        return checknumeric(name, quantity, required=required)


def quantity(value, units):
    """
    Wrap a native value as a quantity, passing None through.
    """
    if value is None:
        return None
    return Quantity(value, units)
