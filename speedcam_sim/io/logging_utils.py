import logging


def setup_logging(level: int | str = logging.INFO):
    """
    Configure the root logger. At DEBUG every zone entry/exit is logged,
    numba's own compiler logging stays at WARNING.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("numba").setLevel(logging.WARNING)


logger = logging.getLogger("speedcam_sim")
