class DestroyWithOrdersError(Exception):
    """Raised when deleting a user that still has completed orders"""
