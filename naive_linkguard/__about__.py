"""Metadata for naive_linkguard."""

__all__ = [
    "__title__",
    "__version__",
    "__description__",
    "__credits__",
    "__requires_python__",
]

__title__ = "naive_linkguard"
__version__ = "0.1.0"
__description__ = (
    "A naive heuristic checker for phishing, tracking and suspicious links in email HTML."
)
__credits__ = [
    {"name": "Matthew D. Martin", "email": "matthewdeanmartin@users.noreply.github.com"}
]
__requires_python__ = ">=3.9"
