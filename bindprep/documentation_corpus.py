"""Pre-extracted library documentation, keyed by declaration signature."""

import logging
from pathlib import Path
from typing import Any

import yaml

from bindprep.declaration import Declaration, Event, Function

logger = logging.getLogger(__name__)


def normalize_type(spelling: str) -> str:
    """Collapse whitespace in a type spelling and glue pointers to the type."""
    text = " ".join(spelling.split())
    return text.replace(" *", "*").replace(" &", "&")


def signature_of(decl: Declaration) -> str:
    """Compute the member signature used as corpus key.

    Callables are keyed as ``name(type, type)`` on their source names; every
    other declaration by its source name alone.
    """
    if isinstance(decl, Function):
        params = ", ".join(normalize_type(p.type) for p in decl.parameters)
        return f"{decl.original_name}({params})"
    if isinstance(decl, Event) and decl.source is not None:
        return signature_of(decl.source)
    return decl.original_name


def owner_of(decl: Declaration) -> str:
    """Return the qualified source name of the enclosing type or namespace."""
    if decl.namespace is None:
        return ""
    return decl.namespace.qualified_original_name


class DocumentationCorpus:
    """Lookup of documentation text by (owning type, member signature)."""

    def __init__(self, module: str, entries: dict[tuple[str, str], str] | None = None) -> None:
        """Initialize the corpus for one module."""
        self.module = module
        self.entries = dict(entries or {})

    @classmethod
    def load(cls, docs_dir: str, module: str) -> "DocumentationCorpus":
        """Load the corpus file of a module from the documentation directory.

        Looks for ``Qt<Module>.yml`` then ``<Module>.yml``. A missing file
        yields an empty corpus.
        """
        corpus = cls(module)
        if not docs_dir:
            return corpus
        root = Path(docs_dir)
        for candidate in (root / f"Qt{module}.yml", root / f"{module}.yml"):
            if candidate.exists():
                doc = yaml.safe_load(candidate.read_text(encoding="utf-8")) or {}
                corpus.add_entries(doc.get("entries") or [])
                logger.info(
                    "Loaded %d documentation entries from %s", len(corpus), candidate
                )
                return corpus
        logger.warning("No documentation corpus for module %s under %s", module, root)
        return corpus

    def add_entries(self, entries: list[dict[str, Any]]) -> None:
        """Index raw corpus entries.

        Entries without a ``signature`` are keyed by ``member``; entries with
        neither document the type itself.
        """
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("text"):
                continue
            owner = str(entry.get("type") or "")
            signature = entry.get("signature")
            if signature is None:
                signature = entry.get("member") or ""
            key = (owner, self._canonical_signature(str(signature)))
            self.entries[key] = str(entry["text"]).strip()

    def lookup(self, owner: str, signature: str) -> str | None:
        """Return the documentation text for a member, or None."""
        return self.entries.get((owner, self._canonical_signature(signature)))

    def lookup_declaration(self, decl: Declaration) -> str | None:
        """Return the documentation text of a declaration, or None."""
        text = self.lookup(owner_of(decl), signature_of(decl))
        if text is None and not isinstance(decl, (Function, Event)):
            # Type-level documentation is filed under the type itself.
            text = self.lookup(decl.qualified_original_name, "")
        return text

    @staticmethod
    def _canonical_signature(signature: str) -> str:
        if "(" not in signature:
            return signature.strip()
        name, _, rest = signature.partition("(")
        params = rest.rsplit(")", 1)[0]
        types = [normalize_type(p) for p in params.split(",") if p.strip()]
        return f"{name.strip()}({', '.join(types)})"

    def __len__(self) -> int:
        return len(self.entries)
