class CaspXmlError(Exception):
    """Base class for errors raised by caspxml"""


class PackageError(CaspXmlError):
    """A .package container could not be parsed"""


class DecodeError(CaspXmlError):
    """A resource payload could not be decompressed"""


class UnresolvedPartsError(CaspXmlError):
    """Some CAS parts could not be classified; nothing was written"""

    def __init__(self, filenames):
        self.filenames = list(filenames)
        super().__init__(
            f"Could not determine the part type for {len(self.filenames)} file(s): "
            + ", ".join(self.filenames)
        )
