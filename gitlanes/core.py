"""This module provides environment and stderr helpers used for tracing"""
import os
import sys

# Default encoding
ENCODING = 'utf-8'


def decode(value, encoding=None, errors='strict'):
    """decode(encoded_string) returns an unencoded unicode string"""
    if value is None:
        result = None
    elif isinstance(value, str):
        result = value
    else:
        try:
            result = value.decode(encoding or ENCODING, errors)
        except ValueError:
            result = value.decode(ENCODING, errors='ignore')
    return result


def getenv(name, default=None):
    return decode(os.getenv(name, default))


def print_stderr(msg, linesep='\n'):
    sys.stderr.write(msg + linesep)
