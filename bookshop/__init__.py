"""Order, stock opname, expense and profit tracking for a small bookshop.

The service layer (``bookshop.services``) holds the business rules and only
depends on a document store. ``bookshop.main`` wires it into a FastAPI app.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
