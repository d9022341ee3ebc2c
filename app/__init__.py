"""Blog GraphQL service.

Listing, lookup and creation of blog posts over a hosted GraphQL endpoint,
exposed through a FastAPI application in ``app.main``.
"""

__all__: list[str] = []
