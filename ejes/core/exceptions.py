"""
Exceptions applicatives.
"""


class EjesException(Exception):
    """Base de toutes les exceptions de l'application."""
    pass


class NotFoundError(EjesException):
    """Ressource demandée introuvable."""
    pass


class SessionNotFoundError(NotFoundError):
    """Mise à jour d'une session dont l'id n'existe pas."""

    def __init__(self, session_id: int):
        self.session_id = session_id
        super().__init__(f"Session with id {session_id} not found")
