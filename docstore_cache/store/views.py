"""
docstore-cache — View Definitions

Secondary index (view) metadata persisted by document stores.

A view maps each document id to at most one index key. The views used here
are declarative: they split the document id on a delimiter and emit one of
the tokens. The same definition renders the JavaScript map function a
view engine consumes and evaluates in-process for stores without one.
"""

from pydantic import BaseModel, Field


class View(BaseModel):
    """A view that indexes documents by one token of their id."""

    name: str = Field(description="View name, unique within its design document")
    prefix: str = Field(description="First id token a document must carry to be indexed")
    delimiter: str = Field(default=":", min_length=1, description="Token delimiter in document ids")
    emit_token: int = Field(default=1, ge=0, description="Index of the token emitted as the row key")
    min_tokens: int = Field(default=3, ge=1, description="Minimum token count for a document to be indexed")

    @property
    def map_function(self) -> str:
        """JavaScript map function equivalent to emit()."""
        return (
            f"function (doc, meta) {{var tokens = meta.id.split('{self.delimiter}'); "
            f"if(tokens.length > {self.min_tokens - 1} && tokens[0] == '{self.prefix}') "
            f"emit(tokens[{self.emit_token}]);}}"
        )

    def emit(self, document_id: str) -> str | None:
        """Return the index key for ``document_id``, or None if it is not indexed."""
        tokens = document_id.split(self.delimiter)
        if len(tokens) < max(self.min_tokens, self.emit_token + 1) or tokens[0] != self.prefix:
            return None
        return tokens[self.emit_token]


class DesignDocument(BaseModel):
    """A named group of views."""

    name: str
    views: list[View] = Field(default_factory=list)

    def get_view(self, name: str) -> View | None:
        for view in self.views:
            if view.name == name:
                return view
        return None

    def has_view(self, name: str) -> bool:
        return self.get_view(name) is not None
