class ConnectionFailedError(Exception):
    """The target database could not be opened or did not answer a ping."""
