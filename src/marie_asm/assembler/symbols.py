"""
Symbol Table
============

Maps label names to addresses. Pass 1 defines labels as it meets them;
pass 2 only looks them up. The phase boundary is explicit: once pass 1
finishes it calls freeze(), which returns a read-only SymbolView and
refuses any further definitions.

Label names are case-insensitive and stored upper-cased.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from marie_asm.errors import (
    DuplicateLabelError,
    UndefinedLabelError,
    SourceLocation,
)


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name, upper-cased
        address: Address the label marks (0-4095)
        location: Where the label was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


def _normalize(name: str) -> str:
    return name.upper()


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous[j + 1] + 1
            deletions = current[j] + 1
            substitutions = previous[j] + (c1 != c2)
            current.append(min(insertions, deletions, substitutions))
        previous = current

    return previous[-1]


class SymbolView:
    """
    Read-only view of a completed symbol table.

    This is all pass 2 gets to see: it can resolve names but has no way
    to add or change them.
    """

    def __init__(self, symbols: dict[str, Symbol]):
        self._symbols = MappingProxyType(symbols)

    def __contains__(self, name: str) -> bool:
        return _normalize(name) in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def get(self, name: str) -> Optional[Symbol]:
        """Return the symbol for a name, or None."""
        return self._symbols.get(_normalize(name))

    def resolve(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the address bound to a label.

        Raises:
            UndefinedLabelError: If the label was never defined
        """
        symbol = self._symbols.get(_normalize(name))
        if symbol is None:
            raise UndefinedLabelError(
                name,
                location=location,
                source_line=source_line,
                similar_labels=self.find_similar(name),
            )
        return symbol.address

    def find_similar(self, name: str) -> list[str]:
        """
        Find labels with similar names for error hints.

        Uses a simple edit distance heuristic; returns at most 3 names.
        """
        wanted = _normalize(name)
        similar = [
            sym for sym in self._symbols
            if abs(len(sym) - len(wanted)) <= 1 and _edit_distance(wanted, sym) <= 2
        ]
        return sorted(similar)[:3]

    def as_dict(self) -> Mapping[str, int]:
        """Return a read-only name -> address mapping."""
        return MappingProxyType({s.name: s.address for s in self._symbols.values()})


class SymbolTable(SymbolView):
    """
    Writable symbol table used during pass 1.

    Usage:
        table = SymbolTable()
        table.define("LOOP", 0)
        view = table.freeze()
        view.resolve("loop")  # -> 0
    """

    def __init__(self):
        self._entries: dict[str, Symbol] = {}
        self._frozen = False
        super().__init__(self._entries)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def define(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Bind a label to an address.

        Raises:
            DuplicateLabelError: If the label is already defined
            RuntimeError: If the table has been frozen
        """
        if self._frozen:
            raise RuntimeError("symbol table is frozen; labels can only be defined in pass 1")

        key = _normalize(name)
        existing = self._entries.get(key)
        if existing is not None:
            raise DuplicateLabelError(
                key,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        symbol = Symbol(key, address, location)
        self._entries[key] = symbol
        return symbol

    def freeze(self) -> SymbolView:
        """End pass 1: return a read-only view and refuse later definitions."""
        self._frozen = True
        return SymbolView(self._entries)
