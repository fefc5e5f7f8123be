from backend.engine.partitioner.partitioner import (
    ImageLoadError,
    Partition,
    load_and_partition,
    load_image,
    partition,
)

__all__ = [
    "ImageLoadError",
    "Partition",
    "load_and_partition",
    "load_image",
    "partition",
]
