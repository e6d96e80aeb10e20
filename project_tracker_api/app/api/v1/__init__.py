"""
Version 1 of the API.

Projects, tasks and statistics as REST resources, plus the tool
catalog and tool calls over HTTP.
"""
