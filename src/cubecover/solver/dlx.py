"""
Algorithm X over a dancing-links arena.

Nodes live in flat integer arrays rather than as linked objects:

- index 0 is the root of the column header list
- indices 1..num_columns are the column headers (column id c is node c + 1)
- every later index is one cell of one row

``left``/``right`` link a row's cells (and the header list), ``up``/``down``
link a column's cells. ``column[n]`` is the header a node belongs to and
``row_of[n]`` the row index it came from.
"""

import time
from typing import Callable, Iterable, List, Optional, Sequence

from cubecover.core.base import SearchInterrupted, SearchStats


ROOT = 0

StopCheck = Callable[[SearchStats], bool]


class DancingLinks:
    """Toroidal doubly-linked exact-cover structure for one search."""

    def __init__(self, num_columns: int, rows: Iterable[Sequence[int]]):
        """
        Args:
            num_columns: Number of columns; ids run 0..num_columns-1
            rows: Column ids covered by each row, in row order
        """
        if num_columns < 0:
            raise ValueError("num_columns must be non-negative")
        self.num_columns = num_columns
        n = num_columns + 1

        self.left: List[int] = [i - 1 for i in range(n)]
        self.right: List[int] = [i + 1 for i in range(n)]
        self.left[ROOT] = num_columns
        self.right[num_columns] = ROOT
        self.up: List[int] = list(range(n))
        self.down: List[int] = list(range(n))
        self.column: List[int] = list(range(n))
        self.row_of: List[int] = [-1] * n
        self.size: List[int] = [0] * n

        self.num_rows = 0
        for row_index, columns in enumerate(rows):
            self._append_row(row_index, columns)
            self.num_rows += 1

        self.stats = SearchStats()
        self.solution: Optional[List[int]] = None
        self._should_stop: Optional[StopCheck] = None

    def _append_row(self, row_index: int, columns: Sequence[int]) -> None:
        first = None
        for col_id in columns:
            if not 0 <= col_id < self.num_columns:
                raise ValueError(f"Row {row_index} references unknown column {col_id}")
            header = col_id + 1
            node = len(self.column)

            # vertical: append at the bottom of the column
            self.up.append(self.up[header])
            self.down.append(header)
            self.down[self.up[header]] = node
            self.up[header] = node
            self.column.append(header)
            self.row_of.append(row_index)
            self.size[header] += 1

            if first is None:
                first = node
                self.left.append(node)
                self.right.append(node)
            else:
                self.right.append(first)
                self.left.append(self.left[first])
                self.right[self.left[first]] = node
                self.left[first] = node

    def live_columns(self) -> List[int]:
        """Column ids still in the header list, in header order."""
        cols = []
        c = self.right[ROOT]
        while c != ROOT:
            cols.append(c - 1)
            c = self.right[c]
        return cols

    def cover(self, c: int) -> None:
        """Remove header `c` and hide every row that touches it from the other columns."""
        left, right, up, down = self.left, self.right, self.up, self.down
        right[left[c]] = right[c]
        left[right[c]] = left[c]
        i = down[c]
        while i != c:
            j = right[i]
            while j != i:
                up[down[j]] = up[j]
                down[up[j]] = down[j]
                self.size[self.column[j]] -= 1
                j = right[j]
            i = down[i]

    def uncover(self, c: int) -> None:
        """Exact inverse of cover(c); walks in the opposite order."""
        left, right, up, down = self.left, self.right, self.up, self.down
        i = up[c]
        while i != c:
            j = left[i]
            while j != i:
                self.size[self.column[j]] += 1
                up[down[j]] = j
                down[up[j]] = j
                j = left[j]
            i = up[i]
        right[left[c]] = c
        left[right[c]] = c

    def choose_column(self) -> int:
        """Live header with the fewest cells; ties go to the leftmost."""
        best = self.right[ROOT]
        c = self.right[best]
        while c != ROOT and self.size[best] > 0:
            if self.size[c] < self.size[best]:
                best = c
            c = self.right[c]
        return best

    def search(self, should_stop: Optional[StopCheck] = None) -> Optional[List[int]]:
        """
        Find the first exact cover.

        Args:
            should_stop: Optional predicate polled at every recursive step;
                returning True raises SearchInterrupted

        Returns:
            Selected row indices in selection order, or None if no cover exists
        """
        self._should_stop = should_stop
        self.solution = None
        start = time.perf_counter()
        try:
            self._search([])
        finally:
            self.stats.elapsed = time.perf_counter() - start
        return self.solution

    def _search(self, partial: List[int]) -> bool:
        self.stats.nodes += 1
        if self._should_stop is not None and self._should_stop(self.stats):
            raise SearchInterrupted(
                f"Search stopped after {self.stats.nodes} nodes at depth {len(partial)}"
            )

        if self.right[ROOT] == ROOT:
            self.solution = list(partial)
            return True

        c = self.choose_column()
        if self.size[c] == 0:
            self.stats.backtracks += 1
            return False

        self.cover(c)
        r = self.down[c]
        while r != c:
            partial.append(self.row_of[r])
            j = self.right[r]
            while j != r:
                self.cover(self.column[j])
                j = self.right[j]

            if self._search(partial):
                return True

            partial.pop()
            j = self.left[r]
            while j != r:
                self.uncover(self.column[j])
                j = self.left[j]
            r = self.down[r]

        self.uncover(c)
        self.stats.backtracks += 1
        return False


def solve(num_columns: int,
          rows: Iterable[Sequence[int]],
          should_stop: Optional[StopCheck] = None) -> Optional[List[int]]:
    """Build a fresh arena and return the first exact cover (row indices) or None."""
    return DancingLinks(num_columns, rows).search(should_stop)
