"""Syntax highlighting integration."""

from src.integrations.highlight.highlighter import THEMES, highlight, plain_html, resolve_lexer_name

__all__ = ["highlight", "plain_html", "resolve_lexer_name", "THEMES"]
