"""Query functions over the ORM models, one module per aggregate."""
