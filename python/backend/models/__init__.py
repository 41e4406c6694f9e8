from backend.models.board import Cell, Direction, MoveRecord, PuzzleState, Snapshot

__all__ = ["Cell", "Direction", "MoveRecord", "PuzzleState", "Snapshot"]
