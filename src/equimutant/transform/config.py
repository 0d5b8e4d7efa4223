"""
Configuration for the rewrite transforms.
"""

INDENT_DETECTION = {
    "default_indent": "    ",  # 4 spaces
    "max_sample_lines": 100,   # Lines to sample for indent detection
}
