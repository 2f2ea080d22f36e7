"""ASL3 M-Apps installer — add-on installation for AllStarLink 3 nodes."""

__version__ = "0.1.0"
