"""Suppression of private implementation-detail declarations."""

from bindprep.declaration import Declaration


class VisibilityPruner:
    """Explicitly ignores declarations whose name marks them as private.

    A matching declaration is ignored together with its whole subtree and is
    not descended into; everything else is recursed into.
    """

    def __init__(self, prefix: str = "Private", suffix: str = "Private") -> None:
        """Initialize with the reserved name prefix and suffix."""
        self.prefix = prefix
        self.suffix = suffix
        self.ignored = 0

    def is_private_name(self, name: str) -> bool:
        """Check if a name marks an implementation detail."""
        if not name:
            return False
        return (bool(self.prefix) and name.startswith(self.prefix)) or (
            bool(self.suffix) and name.endswith(self.suffix)
        )

    def prune(self, context: Declaration) -> None:
        """Walk the children of a context, suppressing private ones."""
        for decl in context.children():
            self._prune_declaration(decl)

    def _prune_declaration(self, decl: Declaration) -> None:
        if self.is_private_name(decl.name):
            decl.explicitly_ignore()
            self.ignored += 1
            return
        self.prune(decl)
