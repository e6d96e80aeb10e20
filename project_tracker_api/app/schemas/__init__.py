"""
Pydantic schema definitions.

Entity schemas (``project``, ``task``, ``statistics``) are what the data
service returns; ``query`` holds the request and response models of the
REST API, which use upper snake case enumeration names.
"""
