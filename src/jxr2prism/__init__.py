"""jxr2prism - re-highlight JXR source pages and theme Maven documentation sites."""

__version__ = "0.1.0"
