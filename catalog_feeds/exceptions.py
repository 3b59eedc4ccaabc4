"""
Error taxonomy for the catalog feed pipeline.

Every failure is terminal for the request that raised it; nothing is retried.
"""


class CatalogFeedError(Exception):
    """Base class for pipeline failures"""
    pass


class ConfigError(CatalogFeedError):
    """Raised when a required setting (e.g. the upstream URL) is missing"""
    pass


class FetchError(CatalogFeedError):
    """Raised when the upstream catalog cannot be retrieved"""
    pass


class DecodeError(CatalogFeedError):
    """Raised when the upstream payload is not a valid channel array"""
    pass


class RenderError(CatalogFeedError):
    """Raised when an output document cannot be serialized"""
    pass
