# File: site_mapper/report/html_report.py
"""site_mapper.report.html_report: HTML site-map report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_mapper.aggregator import SiteMapReport

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "sitemap.html.j2"


def _outline(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten the nested tree into pre-order ``{"url", "depth"}`` rows."""
    rows: List[Dict[str, Any]] = []
    stack = [tree]
    while stack:
        node = stack.pop()
        rows.append({"url": node["url"], "depth": node["depth"]})
        stack.extend(reversed(node["children"]))
    return rows


def render_html(
    report: SiteMapReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from a template and save it to *output_path*.

    Args:
        report: SiteMapReport object.
        template_dir: directory with the ``sitemap.html.j2`` template;
            ``None`` uses the template shipped with the package.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.
    """
    template_dir = Path(template_dir) if template_dir is not None else TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "root": report.root,
        "max_depth": report.max_depth,
        "total": report.total,
        "depth_counts": report.depth_counts,
        "host_counts": report.host_counts,
        "tree": report.tree,
        "outline": _outline(report.tree),
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
