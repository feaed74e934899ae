"""Identifier to path and URL resolution."""


def join_path(*parts: str | None) -> str:
    """Join parts with a single "/" at each seam, skipping None.

    A leading "/" on a later part does not reset the path the way
    os.path.join does, so identifiers always land under the root.
    """
    present = [part for part in parts if part is not None]
    last = len(present) - 1
    pieces = []
    for index, part in enumerate(present):
        if index > 0:
            part = part.lstrip("/")
        if index < last:
            part = part.rstrip("/")
        pieces.append(part)
    return "/".join(pieces)


class PathResolver:
    """Map identifiers to storage paths and public URLs.

    Identifiers are not sanitized: ".." and embedded separators pass
    through unchanged and keeping them safe is up to the caller.
    """

    def __init__(
        self,
        directory: str,
        prefix: str | None = None,
        host: str | None = None,
    ):
        self.directory = directory
        self.prefix = prefix
        self.host = host

    def path(self, identifier: str) -> str:
        """Return <directory>/<prefix>/<identifier>."""
        return join_path(self.directory, self.prefix, identifier)

    def base_path(self) -> str:
        """Return the directory holding every stored file."""
        return join_path(self.directory, self.prefix)

    def url(self, identifier: str) -> str:
        """Return <host>/<prefix>/<identifier>, leaving out unset parts."""
        return join_path(self.host, self.prefix, identifier)
