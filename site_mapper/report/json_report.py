# site_mapper/report/json_report.py

"""
JSON report generation for SiteMapper.

Serializes a SiteMapReport to a file.
"""
from pathlib import Path

from site_mapper.aggregator import SiteMapReport


def render_json(report: SiteMapReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: SiteMapReport built by ``aggregator.summarize``
    :param output_path: path of the JSON file
    :param pretty: indent the output by 2 spaces
    :return: Path of the saved file

    Example:
    ```python
    from site_mapper.report.json_report import render_json
    report_path = render_json(report, 'reports/sitemap.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
