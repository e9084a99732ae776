"""Application services.

Services implement the two release steps, coordinating between the domain
layer (core/) and infrastructure (git/, site/).
"""

from vimrel.services.builder import BuildError, DescriptorBuilder
from vimrel.services.uploader import UploadError, Uploader, UploadReport

__all__ = [
    "BuildError",
    "DescriptorBuilder",
    "UploadError",
    "UploadReport",
    "Uploader",
]
