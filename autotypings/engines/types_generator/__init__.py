"""Types generator engine — declaration files to ambient module documents."""

from autotypings.engines.types_generator.generator import (
    TypesGenerator,
    document_path,
    document_root,
    sanitize_identifier,
    wrap_module,
)

__all__ = ["TypesGenerator", "document_path", "document_root", "sanitize_identifier", "wrap_module"]
