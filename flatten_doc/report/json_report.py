# flatten_doc/report/json_report.py

"""
JSON dump of the flatten results.
"""
import json
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from flatten_doc.crawler.models import PageResult


def render_json(results: Sequence[PageResult], output_path: Path | str) -> Path:
    """
    Save the results as a JSON list of ``{"url", "content"}`` objects.

    Example:
    ```python
    from flatten_doc.report.json_report import render_json
    path = render_json(results, 'out/results.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump([asdict(r) for r in results], f, ensure_ascii=False, indent=2)

    return output
