"""
Symbol table for the ZR# evaluator.

One flat table per session: no nested scopes. Binding an existing name
replaces its entry; a new name takes one slot out of a fixed capacity.

Author: xwest
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..diagnostics import create_capacity_error
from ..lexer.tokens import SourceLocation
from .values import Value, ValueType

logger = logging.getLogger(__name__)


@dataclass
class Symbol:
    """Represents a symbol in the symbol table."""
    name: str
    value: Value
    location: Optional[SourceLocation] = None

    @property
    def type(self) -> ValueType:
        return self.value.type

    def __str__(self) -> str:
        return f"{self.name}: {self.type.value} = {self.value.render()}"


class SymbolTable:
    """
    Flat name -> Symbol mapping with a fixed capacity.

    Symbol names are unique. Errors are never stored.
    """

    def __init__(self, capacity: int = 256):
        self.capacity = capacity
        self._symbols: Dict[str, Symbol] = {}

    def define(self, name: str, value: Value,
               location: Optional[SourceLocation] = None) -> Symbol:
        """
        Bind or re-bind a name.

        Raises:
            CapacityError: when a new name is bound to a full table
            ValueError: when asked to store an ERROR value
        """
        if value.is_error:
            raise ValueError(f"Refusing to bind '{name}' to an error value")

        existing = self._symbols.get(name)
        if existing is not None:
            logger.debug("rebinding '%s': %s -> %s", name, existing.type.value, value.type.value)
            # The old entry, and any string it held, is dropped here
            symbol = Symbol(name, value, location)
            self._symbols[name] = symbol
            return symbol

        if len(self._symbols) >= self.capacity:
            raise create_capacity_error("C001", self.capacity, location, f"cannot define '{name}'")

        symbol = Symbol(name, value, location)
        self._symbols[name] = symbol
        logger.debug("defined '%s' as %s", name, value.type.value)
        return symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Look up a symbol by name."""
        return self._symbols.get(name)

    def get_value(self, name: str) -> Optional[Value]:
        symbol = self._symbols.get(name)
        return symbol.value if symbol is not None else None

    def names(self) -> List[str]:
        return list(self._symbols)

    def clear(self):
        """Drop every symbol (session teardown)."""
        self._symbols.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __str__(self) -> str:
        return f"SymbolTable({len(self)}/{self.capacity} symbols)"
