"""Record processing: grid reshaping, filtering and export."""

from .matching import filter_records, match_values
from .models import FilterOptions
from .processor import process, process_response

__all__ = [
    "FilterOptions",
    "filter_records",
    "match_values",
    "process",
    "process_response",
]
