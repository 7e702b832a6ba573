"""Generate JSON Merge Patch documents (RFC 7386) from differences between JSON values."""

__version__ = "1.0.0"

from mergediff.diff import diff_text, generate_patch, json_merge_diff

__all__ = ["__version__", "diff_text", "generate_patch", "json_merge_diff"]
