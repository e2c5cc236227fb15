"""Board Assembler - turns remote project data into a Board."""

from boardsync.assembler.assembler import (
    assemble_classic_board,
    assemble_v2_board,
    card_from_item,
)
from boardsync.assembler.models import ClassicCard, ClassicColumn

__all__ = [
    "ClassicCard",
    "ClassicColumn",
    "assemble_classic_board",
    "assemble_v2_board",
    "card_from_item",
]
