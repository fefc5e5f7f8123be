import sys

from loguru import logger

PALETTE = {
    "partitioner": "magenta",
    "engine": "green",
    "session": "blue",
    "app": "cyan",
}

LEVEL_PER_COMPONENT = {
    "partitioner": "INFO",
}


def component_filter(record):
    comp = record["extra"].get("component", "")
    min_level = logger.level(LEVEL_PER_COMPONENT.get(comp, "DEBUG")).no
    return record["level"].no >= min_level


def formatter(record):
    comp = record["extra"].get("component", "")
    colour = PALETTE.get(comp, "white")

    # The colour tag has to be part of the template so loguru renders it.
    return (
        "{time:HH:mm:ss} | "
        f"<{colour}>{comp:<12}</> | "
        "<level>{level: <7}</level> | "
        "<level>{message}</level>\n{exception}"
    )


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default sink with the component-aware stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=formatter,
        filter=component_filter,
        colorize=True,
    )
