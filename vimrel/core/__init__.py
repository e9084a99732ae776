"""Core domain types and logic."""

from .config import (
    BuilderConfig,
    ConfigError,
    UploaderConfig,
    load_config_file,
    merge_options,
    resolve_builder_config,
    resolve_uploader_config,
)
from .descriptor import (
    DescriptorError,
    ReleaseDescriptor,
    dump_descriptor,
    load_descriptor,
    write_descriptor,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "BuilderConfig",
    "ConfigError",
    "UploaderConfig",
    "load_config_file",
    "merge_options",
    "resolve_builder_config",
    "resolve_uploader_config",
    # descriptor
    "DescriptorError",
    "ReleaseDescriptor",
    "dump_descriptor",
    "load_descriptor",
    "write_descriptor",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
