from backend.engine.session.session import LoadTicket, PuzzleSession, SessionView

__all__ = ["LoadTicket", "PuzzleSession", "SessionView"]
