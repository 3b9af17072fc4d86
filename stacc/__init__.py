# Stacc language package
# This package provides a parser and interpreter for the Stacc language.
from .errors import StaccError, ParseError, StaccRuntimeError
from .interpreter import run_program, Interpreter
from .parser import parse_program, Parser

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'Parser',
    'StaccError',
    'ParseError',
    'StaccRuntimeError',
]
