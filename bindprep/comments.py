"""Comment passes: drop parser comments, then backfill from the documentation corpus."""

from bindprep.declaration import ASTContext, PipelineStage, TranslationUnit
from bindprep.documentation_corpus import DocumentationCorpus
from bindprep.pipeline import DeclarationPass


class ClearCommentsPass(DeclarationPass):
    """Removes every comment the parser attached; they are not trusted."""

    name = "clear_comments"
    requires = PipelineStage.RESOLVED
    produces = PipelineStage.RESOLVED

    def run(self, lib: ASTContext) -> None:
        for decl in lib.iter_declarations():
            if decl.comment is not None:
                decl.comment = None
                self.count("cleared")


class BackfillCommentsPass(DeclarationPass):
    """Attaches corpus documentation to every generated declaration.

    Declarations without an entry keep no comment.
    """

    name = "backfill_comments"
    requires = PipelineStage.RESOLVED
    produces = PipelineStage.COMMENTED

    def __init__(self, corpus: DocumentationCorpus) -> None:
        """Initialize with the module's documentation corpus."""
        super().__init__()
        self.corpus = corpus

    def run(self, lib: ASTContext) -> None:
        for decl in lib.iter_declarations():
            if isinstance(decl, TranslationUnit) or not decl.is_generated:
                continue
            text = self.corpus.lookup_declaration(decl)
            if text is None:
                self.count("undocumented")
                continue
            decl.comment = text
            self.count("documented")
