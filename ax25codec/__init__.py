#!/usr/bin/env python3

"""
AX.25, HDLC and APRS codecs for amateur packet radio.
"""

__version__ = '0.1.0'
