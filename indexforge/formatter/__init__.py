from .printer import Printer

__all__ = ["Printer"]
