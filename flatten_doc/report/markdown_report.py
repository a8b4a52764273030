# flatten_doc/report/markdown_report.py

"""
Writes the flattened documentation as one Markdown file.
"""
from pathlib import Path
from typing import Sequence

from flatten_doc.crawler.models import PageResult

SEPARATOR = "\n\n---\n\n"


def render_markdown(results: Sequence[PageResult], output_path: Path | str) -> Path:
    """
    Join the results' content with a horizontal-rule separator and save it.

    :param results: page results in output order
    :param output_path: path of the Markdown file
    :return: Path of the saved file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    text = SEPARATOR.join(r.content for r in results)
    output.write_text(text + "\n", encoding="utf-8")
    return output
