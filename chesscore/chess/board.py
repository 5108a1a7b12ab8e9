"""The Game board: the configuration of pieces on the 8x8 grid"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess.pieces import PLAYING_COLORS, Color, Piece, PieceType
from chesscore.chess.square import ALL_SQUARES, BOARD_SIZE, Square

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

BoardSnapshot = tuple[tuple[int, ...], ...]


@dataclass
class Board:
    """
    8x8 grid of signed piece codes (see pieces.py).

    The square of each king is cached, so check detection never has to scan the board for it.
    The cache is kept up to date by every method that writes to the grid.
    """

    grid: list[list[int]] = field(
        default_factory=lambda: [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    )
    kings: dict[Color, Optional[Square]] = field(
        default_factory=lambda: {Color.WHITE: None, Color.BLACK: None}
    )

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_PLACEMENT)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string, the piece placement.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        board = cls()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    board.place_piece(Piece.from_fen(character), Square(row, col))
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_SIZE))

    def _row_to_fen(self, row: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_SIZE):
            piece = self.piece(Square(row, col))
            if piece.is_empty():
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- READING ---
    def code(self, square: Square) -> int:
        return self.grid[square.row][square.col]

    def piece(self, square: Square) -> Piece:
        return Piece.from_code(self.code(square))

    def is_empty(self, square: Square) -> bool:
        return self.code(square) == 0

    def color_at(self, square: Square) -> Color:
        code = self.code(square)
        if code == 0:
            return Color.NONE
        return Color.WHITE if code > 0 else Color.BLACK

    def king_square(self, color: Color) -> Optional[Square]:
        return self.kings[color]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square in ALL_SQUARES if self.color_at(square) == color]

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square in ALL_SQUARES if self.code(square) == piece.code]

    def piece_count(self) -> int:
        return sum(1 for square in ALL_SQUARES if not self.is_empty(square))

    def count_kings(self, color: Color) -> int:
        return len(self.locate_pieces(Piece(PieceType.KING, color)))

    def snapshot(self) -> BoardSnapshot:
        """Immutable copy of the grid, safe to hand out to readers."""
        return tuple(tuple(row) for row in self.grid)

    def copy(self) -> Self:
        return type(self)(grid=[list(row) for row in self.grid], kings=dict(self.kings))

    # --- WRITING ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        self._forget_king_on(square)
        self.grid[square.row][square.col] = piece.code
        if piece.type == PieceType.KING:
            self.kings[piece.color] = square

    def remove_piece(self, square: Square) -> Piece:
        removed = self.piece(square)
        self._forget_king_on(square)
        self.grid[square.row][square.col] = 0
        return removed

    def move_piece(self, from_square: Square, to_square: Square) -> Piece:
        """Relocate whatever stands on from_square. Returns the piece that was standing on the target square (if any)."""
        moving = self.remove_piece(from_square)
        captured = self.piece(to_square)
        self.place_piece(moving, to_square)
        return captured

    def _forget_king_on(self, square: Square) -> None:
        for color in PLAYING_COLORS:
            if self.kings[color] == square:
                self.kings[color] = None
