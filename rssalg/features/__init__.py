"""Feature splitters for co-training views."""

from rssalg.features.splitters import (
    DatasetSplitter,
    NaturalSplitter,
    RandomSplitter,
    get_splitter,
)

__all__ = [
    "DatasetSplitter",
    "NaturalSplitter",
    "RandomSplitter",
    "get_splitter",
]
