"""Bate-papo chat room backend (FastAPI + MongoDB)."""

__version__ = "0.1.0"

BROADCAST = "Todos"
