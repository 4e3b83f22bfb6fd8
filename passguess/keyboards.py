"""
passguess.keyboards

Keyboard layouts and the adjacency graphs the spatial matcher walks.

A graph maps every character to a fixed-length list of neighbouring keys in
clockwise order. Each neighbour is the whole key token (unshifted char first,
shifted char second, eg 'qQ') or None at the edge of the layout, so the
position in the list is a direction and the index inside the token tells
whether the key was shifted.
"""

from typing import Callable, Dict, List, Optional, Tuple

Graph = Dict[str, List[Optional[str]]]

QWERTY = r'''
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) -_ =+
    qQ wW eE rR tT yY uU iI oO pP [{ ]} \|
     aA sS dD fF gG hH jJ kK lL ;: '"
      zZ xX cC vV bB nN mM ,< .> /?
'''

DVORAK = r'''
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) [{ ]}
    '" ,< .> pP yY fF gG cC rR lL /? =+ \|
     aA oO eE uU iI dD hH tT nN sS -_
      ;: qQ jJ kK xX bB mM wW vV zZ
'''

KEYPAD = r'''
  / * -
7 8 9 +
4 5 6
1 2 3
  0 .
'''

MAC_KEYPAD = r'''
  = / *
7 8 9 -
4 5 6 +
1 2 3
  0 .
'''


def slanted_adjacent_coords(x: int, y: int) -> List[Tuple[int, int]]:
    """
    Six neighbours on a row-staggered keyboard: left, two above, right, two
    below. Only near-diagonal keys count, so 'g' touches t, y, b, v but not
    r, u, n, c.
    """
    return [(x - 1, y), (x, y - 1), (x + 1, y - 1), (x + 1, y), (x, y + 1), (x - 1, y + 1)]


def aligned_adjacent_coords(x: int, y: int) -> List[Tuple[int, int]]:
    """Eight clockwise neighbours on a keypad whose rows are vertically aligned."""
    return [
        (x - 1, y), (x - 1, y - 1), (x, y - 1), (x + 1, y - 1),
        (x + 1, y), (x + 1, y + 1), (x, y + 1), (x - 1, y + 1),
    ]


def build_graph(layout: str, slanted: bool) -> Graph:
    """
    Build an adjacency graph from a layout drawing.

    On qwerty 'g' maps to ['fF', 'tT', 'yY', 'hH', 'bB', 'vV'];
    on the keypad '7' maps to [None, None, None, '/', '8', '5', '4', None].
    """
    tokens = layout.split()
    token_size = len(tokens[0])
    if any(len(token) != token_size for token in tokens):
        raise ValueError("token length mismatch in layout:\n" + layout)
    # one column is the token plus the whitespace after it
    x_unit = token_size + 1
    adjacency: Callable[[int, int], List[Tuple[int, int]]] = (
        slanted_adjacent_coords if slanted else aligned_adjacent_coords
    )

    positions: Dict[Tuple[int, int], str] = {}
    for y, line in enumerate(layout.split("\n")):
        # each keyboard row is drawn one space further right than the last
        slant = y - 1 if slanted else 0
        for token in line.split():
            x, remainder = divmod(line.index(token) - slant, x_unit)
            if remainder != 0:
                raise ValueError(f"unexpected x offset for {token!r} in layout:\n{layout}")
            positions[(x, y)] = token

    graph: Graph = {}
    for (x, y), chars in positions.items():
        for char in chars:
            graph[char] = [positions.get(coord) for coord in adjacency(x, y)]
    return graph


def default_graphs() -> Dict[str, Graph]:
    return {
        "qwerty": build_graph(QWERTY, slanted=True),
        "dvorak": build_graph(DVORAK, slanted=True),
        "keypad": build_graph(KEYPAD, slanted=False),
        "mac_keypad": build_graph(MAC_KEYPAD, slanted=False),
    }


def average_degree(graph: Graph) -> int:
    """
    Mean number of real neighbours per key, rounded down.

    On qwerty 'g' has degree 6, being adjacent to 'ftyhbv', while '\\' has degree 1.
    """
    total = sum(len([n for n in neighbors if n]) for neighbors in graph.values())
    return total // len(graph)
