from backend.engine.gamesolver.solver import SearchResult, SearchStatus, Solver

__all__ = ["SearchResult", "SearchStatus", "Solver"]
