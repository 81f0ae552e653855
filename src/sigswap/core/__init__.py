"""
Contains the core elements that are used within sigswap

Core:
    -Provides the reference formats and protocol constants
    -Provides fixed-width byte stream readers
    -Provides custom exceptions for the sigswap elements
"""
# core/__init__.py
from sigswap.core.byte_stream import *
from sigswap.core.exceptions import *
from sigswap.core.formats import *
