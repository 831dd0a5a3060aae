from .dto import Album, Photo  # noqa: F401
