"""Mapping between adapter-relative paths and object keys."""

SEPARATOR = "/"


class PathPrefixer:
    """Applies and removes the adapter's key prefix.

    The prefix is stored with exactly one trailing separator, so ``"uploads"``,
    ``"uploads/"`` and ``"/uploads//"`` all root the adapter at ``uploads/``.
    An empty prefix roots the adapter at the bucket itself.
    """

    def __init__(self, prefix: str = ""):
        prefix = (prefix or "").strip("\\/")
        self.prefix = prefix + SEPARATOR if prefix else ""

    def apply(self, path: str) -> str:
        """Return the object key for ``path``."""
        return self.prefix + path.lstrip("\\/")

    def strip(self, key: str) -> str:
        """Return the adapter-relative path for an object key."""
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def directory(self, path: str) -> str:
        """Return the listing prefix for a directory path.

        The result always ends with the separator so that ``images`` never
        matches ``images-backup``. The adapter root of an unprefixed adapter
        is the empty prefix.
        """
        key = self.apply(path).rstrip(SEPARATOR)
        return key + SEPARATOR if key else ""
