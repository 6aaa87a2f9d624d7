import logging

import coloredlogs


def setup_logging(level: int | str = "INFO") -> None:
    """
    Installs a colored handler on the root logger. The library only emits records, this is meant to be called by
    scripts.
    """
    coloredlogs.install(
        level=level,
        fmt="%(asctime)s %(levelname)-7s %(message)s",
        field_styles={
            "levelname": {"color": "black", "bright": True, "bold": True},
            "asctime": {"color": "magenta", "bright": True},
        },
        level_styles={
            "debug": {"color": "white", "faint": True},
            "info": {"color": "cyan", "faint": True},
            "critical": {"color": "red", "bold": True},
            "error": {"color": "red", "bright": True},
            "warning": {"color": "yellow", "bright": True},
        },
    )
    logging.debug(f"Logging set up at level {logging.getLevelName(logging.getLogger().level)}.")
