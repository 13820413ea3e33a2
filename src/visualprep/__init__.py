"""visualprep: batch image slicing, scaling, letterboxing and video assembly."""

__version__ = "0.1.0"
