import logging


def setup_logging(level: str = "INFO") -> None:
    """
    À appeler une fois à la création de l'app. Logs console détaillés.
    """
    root = logging.getLogger()
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        numeric = logging.INFO

    if root.handlers:
        # déjà configuré (évite les doublons)
        root.setLevel(numeric)
        return

    root.setLevel(numeric)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
