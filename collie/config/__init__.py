from .load import config_from_dict, find_config_file, load_config
from .model import CONFIG_FILE_NAMES, CollieConfig, ExportOptions, FormatOptions, MarkupTarget

__all__ = [
    "CollieConfig",
    "FormatOptions",
    "ExportOptions",
    "MarkupTarget",
    "CONFIG_FILE_NAMES",
    "load_config",
    "config_from_dict",
    "find_config_file",
]
