"""Got - a content-addressed object store with Git's loose-object format.

Got stores blobs, trees and commits as zlib-compressed records under
``.got/objects/`` and identifies each one by the SHA-1 digest of its
canonical encoding.
"""

__version__ = "0.1.0"
__author__ = "Got Contributors"

__all__ = ["__version__", "__author__"]
