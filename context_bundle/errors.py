class ContextBundleError(Exception):
    """Base class for every fatal error raised while building a bundle."""


class InputFolderError(ContextBundleError):
    pass


class RootNotFoundError(ContextBundleError):
    pass


class EnumerationError(ContextBundleError):
    pass


class ReadError(ContextBundleError):
    pass


class WriteError(ContextBundleError):
    pass
