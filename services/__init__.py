"""
Service layer wrapping one AWS SDK client per module.

Each wrapper performs a single SDK call, logs the response and maps a
failed call to the operation's failure value instead of raising.
"""
