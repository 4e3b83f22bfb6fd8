"""
passguess.tables

Read-only lookup tables consumed by the matchers:
- ranked dictionaries (word -> frequency rank, 1 = most common) per list
- keyboard adjacency graphs per layout
- the l33t substitution table

The default tables are built once, on first use, behind a lock, and are then
shared by every estimate() call without further synchronisation.
"""

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .keyboards import Graph, default_graphs
from .storage import atomic_read_bytes, read_json_bytes, read_package_bytes

logger = logging.getLogger(__name__)

FREQUENCY_LISTS_FILE = "frequency_lists.json"
USER_INPUTS_LIST = "user_inputs"

L33T_TABLE: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "a": ("4", "@"),
    "b": ("8",),
    "c": ("(", "{", "[", "<"),
    "e": ("3",),
    "g": ("6", "9"),
    "i": ("1", "!", "|"),
    "l": ("1", "|", "7"),
    "o": ("0",),
    "s": ("$", "5"),
    "t": ("+", "7"),
    "x": ("%",),
    "z": ("2",),
})

RankedDictionaries = Mapping[str, Mapping[str, int]]


def build_ranked_dict(ordered_list: Iterable[str]) -> Dict[str, int]:
    """Rank words by list position, starting at 1. A repeated word keeps its first rank."""
    ranked: Dict[str, int] = {}
    for idx, word in enumerate(ordered_list, 1):
        ranked.setdefault(word, idx)
    return ranked


@dataclass(frozen=True)
class LookupTables:
    ranked_dictionaries: RankedDictionaries
    graphs: Mapping[str, Graph]
    l33t_table: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: L33T_TABLE)

    def lookup(self, list_name: str, word: str) -> Optional[int]:
        """Frequency rank of word in list_name, or None."""
        ranked = self.ranked_dictionaries.get(list_name)
        if ranked is None:
            return None
        return ranked.get(word.lower())

    def neighbors(self, layout: str, char: str) -> List[Optional[str]]:
        """Clockwise neighbour keys of char on layout (None at the edges)."""
        graph = self.graphs.get(layout)
        if graph is None:
            return []
        return list(graph.get(char, ()))

    def with_user_inputs(self, user_inputs: Iterable[object]) -> RankedDictionaries:
        """
        Ranked dictionaries for one call: the shared lists plus a user_inputs
        list built from the caller's context strings (username, email...).
        """
        sanitized = [str(value).lower() for value in user_inputs]
        merged = dict(self.ranked_dictionaries)
        merged[USER_INPUTS_LIST] = build_ranked_dict(sanitized)
        return MappingProxyType(merged)


def load_frequency_lists(path: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Load {list_name: [word, ...]} ordered most to least common, from a JSON
    file, or from the lists bundled with the package when path is None.
    """
    raw = atomic_read_bytes(path) if path else read_package_bytes(FREQUENCY_LISTS_FILE)
    lists = read_json_bytes(raw)
    if not isinstance(lists, dict):
        raise ValueError("frequency lists must be a JSON object of {name: [words]}")
    return lists


def build_tables(
    frequency_lists: Mapping[str, Iterable[str]],
    graphs: Optional[Mapping[str, Graph]] = None,
) -> LookupTables:
    ranked = {
        name: MappingProxyType(build_ranked_dict(words))
        for name, words in frequency_lists.items()
    }
    if graphs is None:
        graphs = default_graphs()
    frozen_graphs = {
        name: MappingProxyType({char: tuple(adj) for char, adj in graph.items()})
        for name, graph in graphs.items()
    }
    return LookupTables(
        ranked_dictionaries=MappingProxyType(ranked),
        graphs=MappingProxyType(frozen_graphs),
    )


_default_tables: Optional[LookupTables] = None
_lock = threading.Lock()


def get_tables() -> LookupTables:
    """The process-wide default tables, built on first call."""
    global _default_tables
    if _default_tables is None:
        with _lock:
            if _default_tables is None:
                tables = build_tables(load_frequency_lists())
                logger.info(
                    "loaded %d frequency lists (%d words) and %d keyboard graphs",
                    len(tables.ranked_dictionaries),
                    sum(len(d) for d in tables.ranked_dictionaries.values()),
                    len(tables.graphs),
                )
                _default_tables = tables
    return _default_tables
