"""
Service layer.

``DataService`` (in ``data_service``) combines the project, task and
statistics services over one SQLite database and is the only object
the adapters use.
"""
