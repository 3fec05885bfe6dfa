"""Symbol table for functions, operators and types across Erlang modules."""

__version__ = "0.1.0"
