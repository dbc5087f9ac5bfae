from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Instant courant, toujours en UTC avec fuseau (sérialisé en ISO 8601).
    """
    return datetime.now(timezone.utc)


def now_if_missing(value):
    """
    Validateur "before" : un horodatage absent ou vide vaut maintenant.
    """
    if value is None or value == "":
        return utcnow()
    return value
