"""
Data access layer.

Repositories wrap a SQLAlchemy session, flush their writes and translate
driver errors into RepositoryError; committing is left to the services.
"""
