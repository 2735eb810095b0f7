"""
Connection Games - Place pieces on a board until someone makes a line.

ConnectionGame is parametrized by board height, width and the length of
the line needed to win. Squares are indexed row by row starting at 0; an
action is the index of an empty square. TicTacToe is the 3x3 variant
with lines of 3.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Callable, ClassVar, Sequence

from ..engine_core.state import GameState, Result
from ..engine_core.transition import Transition

EMPTY_SQUARE = "."


@lru_cache(maxsize=None)
def board_lines(height: int, width: int, line_length: int) -> tuple[tuple[int, ...], ...]:
    """Every horizontal, vertical and diagonal run of line_length squares."""
    lines = []
    directions = ((0, 1), (1, 0), (1, 1), (1, -1))
    for row in range(height):
        for col in range(width):
            for d_row, d_col in directions:
                end_row = row + d_row * (line_length - 1)
                end_col = col + d_col * (line_length - 1)
                if 0 <= end_row < height and 0 <= end_col < width:
                    lines.append(tuple(
                        (row + d_row * i) * width + col + d_col * i
                        for i in range(line_length)
                    ))
    return tuple(lines)


@dataclass(frozen=True)
class ConnectionGame(GameState):
    """
    Generic connection game for two roles.

    The board is a string of height * width characters: EMPTY_SQUARE or
    the index of the role that owns the square.
    """
    roles: ClassVar[tuple[str, ...]] = ("First", "Second")

    height: int = 9
    width: int = 9
    line_length: int = 5
    board: str = ""
    current: int = 0

    def __post_init__(self):
        if self.line_length > max(self.height, self.width):
            raise ValueError(f"Lines of {self.line_length} do not fit a {self.height}x{self.width} board")
        size = self.height * self.width
        if not self.board:
            object.__setattr__(self, "board", EMPTY_SQUARE * size)
        elif len(self.board) != size:
            raise ValueError(f"Board must have {size} squares, got {len(self.board)}")

    @property
    def name(self) -> str:
        return f"{self.__class__.__name__}_{self.height}x{self.width}-{self.line_length}"

    def winner(self) -> str | None:
        """The role that completed a line, if any."""
        board = self.board
        for line in board_lines(self.height, self.width, self.line_length):
            first = board[line[0]]
            if first != EMPTY_SQUARE and all(board[i] == first for i in line):
                return self.roles[int(first)]
        return None

    def result(self) -> Result | None:
        winner = self.winner()
        if winner is not None:
            return self.victory(winner)
        if EMPTY_SQUARE not in self.board:
            return self.tied()
        return None

    def active_roles(self) -> tuple[str, ...]:
        if self.is_terminal:
            return ()
        return (self.roles[self.current],)

    def actions(self, role: str):
        if role not in self.active_roles():
            return None
        return tuple(i for i, square in enumerate(self.board) if square == EMPTY_SQUARE)

    def apply(self, move: Transition) -> ConnectionGame:
        square = move.action(self.roles[self.current])
        board = self.board[:square] + str(self.current) + self.board[square + 1:]
        return replace(self, board=board, current=(self.current + 1) % len(self.roles))

    def rows(self) -> list[str]:
        return [self.board[r * self.width:(r + 1) * self.width] for r in range(self.height)]

    def __str__(self) -> str:
        return "\n".join(self.rows())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(board={self.board!r}, current={self.current})"


@dataclass(frozen=True)
class TicTacToe(ConnectionGame):
    roles: ClassVar[tuple[str, ...]] = ("Xs", "Os")

    height: int = 3
    width: int = 3
    line_length: int = 3

    @property
    def name(self) -> str:
        return "TicTacToe"

    @staticmethod
    def heuristic_from_weights(weights: Sequence[float]) -> Callable[[GameState, str], float]:
        """
        Heuristic from one weight per square.

        The value is the sum of the weights of the role's squares minus the
        weights of the opponent's squares, divided by the sum of all
        absolute weights, so it stays within [-1, 1].
        """
        weights = tuple(weights)
        weight_sum = sum(abs(w) for w in weights)
        if weight_sum <= 0:
            raise ValueError("At least one weight must be non-zero")

        def heuristic(state: GameState, role: str) -> float:
            mark = str(state.roles.index(role))
            total = 0.0
            for square, weight in zip(state.board, weights):
                if square == EMPTY_SQUARE:
                    continue
                total += weight if square == mark else -weight
            return total / weight_sum

        heuristic.weights = weights
        return heuristic


# Center is worth the most, then the corners.
TicTacToe.default_heuristic = staticmethod(
    TicTacToe.heuristic_from_weights([2, 1, 2, 1, 5, 1, 2, 1, 2])
)
