import os
from html import escape
import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup
from gitgrade.renderer.manifest import RenderManifest

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _md(text: str) -> Markup:
    # Model output is untrusted: escape first, then let Markdown add formatting
    if not text:
        return Markup("")
    return Markup(markdown.markdown(escape(text), extensions=["extra"]))


def _score_band(score: int) -> str:
    if score >= 75:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


def render_report_html(manifest: RenderManifest) -> str:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("report.html")

    report = manifest.report
    return template.render(
        details=manifest.details,
        theme=manifest.theme,
        commit_window=manifest.commit_window,
        score=report.score,
        score_band=_score_band(report.score),
        rating=report.rating,
        summary=_md(report.summary),
        roadmap=report.roadmap,
    )


def render_to_html(manifest: RenderManifest, output_path: str) -> str:
    """
    Renders the report to a standalone HTML file and returns its path.
    """
    html_content = render_report_html(manifest)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    return output_path
