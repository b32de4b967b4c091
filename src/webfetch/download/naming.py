"""Output file naming."""

DEFAULT_FILENAME = "index.html"


def filename_from_path(path: str) -> str:
    """
    Derive the local file name for a request path.

    A path ending in "/" maps to index.html; any other path maps to its
    final "/"-delimited segment, verbatim (query string included). An
    existing file of that name is overwritten by the download.

    Examples:
        >>> filename_from_path("/a/b/report.pdf")
        'report.pdf'
        >>> filename_from_path("/docs/")
        'index.html'
    """
    if path.endswith("/"):
        return DEFAULT_FILENAME
    return path[path.rfind("/") + 1:]
