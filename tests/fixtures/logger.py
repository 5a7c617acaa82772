#!/usr/bin/env python3

"""
A logging.Logger substitute for testing purposes.  Every call is recorded
in `logrecords` so tests can check what the codecs reported.
"""

import pytest
from sys import exc_info


class DummyLogger(object):
    def __init__(self):
        self.logrecords = []

    def _addrecord(self, log_method, log_args, log_kwargs, _exc_info=False):
        if _exc_info:
            (ex_type, ex_val, ex_tb) = exc_info()
        else:
            ex_type = None
            ex_val = None
            ex_tb = None

        self.logrecords.append(dict(
            method=log_method, args=log_args, kwargs=log_kwargs,
            ex_type=ex_type, ex_val=ex_val, ex_tb=ex_tb
        ))

    def methods(self):
        """
        Return the logging methods called, in order.
        """
        return [record['method'] for record in self.logrecords]

    def messages(self, method=None):
        """
        Return the formatted messages logged, optionally for one method.
        """
        return [
            (record['args'][0] % record['args'][1:])
            for record in self.logrecords
            if (method is None) or (record['method'] == method)
        ]

    # Message logging endpoints
    def debug(self, *args, exc_info=False, **kwargs):
        self._addrecord('debug', args, kwargs, exc_info)

    def info(self, *args, exc_info=False, **kwargs):
        self._addrecord('info', args, kwargs, exc_info)

    def warning(self, *args, exc_info=False, **kwargs):
        self._addrecord('warning', args, kwargs, exc_info)

    def error(self, *args, exc_info=False, **kwargs):
        self._addrecord('error', args, kwargs, exc_info)

    def exception(self, *args, **kwargs):
        self._addrecord('exception', args, kwargs, True)

    def isEnabledFor(self, level):
        return True


@pytest.fixture
def logger():
    """Dummy logger instance that mocks logging.Logger."""
    return DummyLogger()
