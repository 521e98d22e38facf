"""Builtins - compiler builtin functions scraped from the Zig language reference."""

from zigdocs.builtins.server import create_builtins_server

__all__ = ["create_builtins_server"]
