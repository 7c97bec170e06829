# IO package initialization
from .image_loader import (
    load_image,
    list_image_files,
    is_image_file,
)
from .image_saver import (
    save_image,
    export_filename,
)
from .edit_store import (
    EditStore,
    serialize_adjustments,
    deserialize_adjustments,
)

__all__ = [
    'load_image',
    'list_image_files',
    'is_image_file',
    'save_image',
    'export_filename',
    'EditStore',
    'serialize_adjustments',
    'deserialize_adjustments',
]
