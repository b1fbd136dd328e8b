from .content_csv import (
    chapters_from_frame,
    chapters_to_frame,
    is_synthetic_section,
    read_content_csv,
    template_frame,
    write_content_csv,
    write_template_csv,
)

__all__ = [
    "chapters_from_frame",
    "chapters_to_frame",
    "is_synthetic_section",
    "read_content_csv",
    "template_frame",
    "write_content_csv",
    "write_template_csv",
]
