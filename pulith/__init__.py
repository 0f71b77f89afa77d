"""Native package manager helpers: versions, descriptors, profiles, downloads and inventory."""

__version__ = "0.1.0"