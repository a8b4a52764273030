"""
Writers for flattened documentation.

Available functions:
  - render_markdown(results, output_path) -> Path
  - render_json(results, output_path) -> Path
"""
from .json_report import render_json
from .markdown_report import SEPARATOR, render_markdown

__all__ = ["render_markdown", "render_json", "SEPARATOR"]
