#!/usr/bin/env python3

from .fixtures.logger import logger

assert logger
