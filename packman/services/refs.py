"""Reference helpers shared by the services."""


def pk_of(obj):
    """Primary key of a model instance, or the value itself if it is already a key."""
    return getattr(obj, 'pk', obj)
