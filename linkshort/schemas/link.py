"""Response schemas for the link shortener."""

from pydantic import BaseModel


class Link(BaseModel):
    """A stored link as returned to clients.

    ``short`` is the public path, the request host joined with the code.
    """

    short: str
    original: str
