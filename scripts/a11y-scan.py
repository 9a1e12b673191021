#!/usr/bin/env python3
"""Accessibility scan of the local dev server with a readable HTML report.

Loads http://localhost:5173/ in headless Chromium, runs axe-core limited to
the rule tags of the requested WCAG level, and writes the violations to
accessibility-report/a11y-report.html.

Usage:
    python scripts/a11y-scan.py [a|aa|aaa]
"""

import argparse
import html
import sys
from pathlib import Path

try:
    from playwright.sync_api import sync_playwright
except ImportError:
    print("Error: playwright is required. Install with: pip install playwright && playwright install")
    sys.exit(1)


TARGET_URL = "http://localhost:5173/"

AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"

DEFAULT_LEVEL = "aa"

# Cumulative: each level includes the rules of the levels below it
WCAG_TAGS = {
    "a": ["wcag2a"],
    "aa": ["wcag2a", "wcag2aa"],
    "aaa": ["wcag2a", "wcag2aa", "wcag2aaa"],
}

SEVERITY_ORDER = ["critical", "serious", "moderate", "minor"]

DEFAULT_IMPACT = "moderate"

REPORT_DIR = Path("accessibility-report")
REPORT_PATH = REPORT_DIR / "a11y-report.html"


def resolve_tags(level):
    """Map a WCAG level name to its axe rule tags.

    Matching is case-insensitive. Anything that is not a known level
    resolves to the AA tag set.
    """
    key = (level or "").lower()
    return list(WCAG_TAGS.get(key, WCAG_TAGS[DEFAULT_LEVEL]))


def build_scan_request(level=DEFAULT_LEVEL):
    """Build the scan configuration handed to run_scan().

    The raw level string is kept for display; only the tag set is
    affected by the AA fallback.
    """
    return {
        "wcag_level": level,
        "target_url": TARGET_URL,
        "tags": resolve_tags(level),
    }


def inject_axe_and_run(page, tags):
    """Inject axe-core into the page and run an audit limited to `tags`.

    Returns {"violations": [...]} with each violation trimmed to the fields
    the report uses.
    """
    page.add_script_tag(url=AXE_CDN_URL)
    page.wait_for_function("typeof window.axe !== 'undefined'")

    return page.evaluate("""async (tags) => {
        const results = await axe.run(document, {
            runOnly: { type: 'tag', values: tags },
            resultTypes: ['violations']
        });
        return {
            violations: results.violations.map(v => ({
                id: v.id,
                impact: v.impact,
                description: v.description,
                help: v.help,
                helpUrl: v.helpUrl,
                tags: v.tags,
                nodes: v.nodes.map(n => ({
                    target: n.target,
                    failureSummary: n.failureSummary || null
                }))
            }))
        };
    }""", tags)


def run_scan(request):
    """Load the target page and audit it. Returns the axe violation result.

    Navigation and audit errors propagate to the caller; the browser is
    closed either way.
    """
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            context = browser.new_context()
            page = context.new_page()
            page.goto(request["target_url"])
            results = inject_axe_and_run(page, request["tags"])
        finally:
            browser.close()
    return results


def count_by_severity(violations):
    """Count violated rules per impact level."""
    counts = {s: 0 for s in SEVERITY_ORDER}
    for v in violations:
        impact = v.get("impact") or DEFAULT_IMPACT
        counts[impact] = counts.get(impact, 0) + 1
    return counts


def _esc(value):
    return html.escape(str(value))


def _format_target(target):
    # Selectors inside iframes / shadow roots come back as nested lists
    parts = []
    for selector in target or []:
        if isinstance(selector, (list, tuple)):
            parts.append(" ".join(str(s) for s in selector))
        else:
            parts.append(str(selector))
    return ", ".join(parts)


def _format_failure_summary(summary):
    if not summary:
        return "N/A"
    return "<br/>".join(_esc(line) for line in summary.splitlines())


REPORT_STYLES = [
    "<style>",
    "body { font-family: Arial, sans-serif; padding: 20px; background: #fafafa; }",
    "h1 { text-align: center; }",
    ".violation-card { background: white; padding: 20px; border-radius: 12px; ",
    "  margin-bottom: 20px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }",
    ".impact-critical { border-left: 8px solid #b30000; }",
    ".impact-serious { border-left: 8px solid #e63946; }",
    ".impact-moderate { border-left: 8px solid #ffb703; }",
    ".impact-minor { border-left: 8px solid #2a9d8f; }",
    ".impact-label { font-weight: bold; padding: 5px 10px; border-radius: 6px; ",
    "  display: inline-block; color: white; margin-bottom: 10px; }",
    ".critical { background: #b30000; }",
    ".serious { background: #e63946; }",
    ".moderate { background: #ffb703; color: black; }",
    ".minor { background: #2a9d8f; }",
    ".node-list { background: #f5f5f5; padding: 10px; border-radius: 6px; ",
    "  font-family: monospace; margin-top: 10px; }",
    "details { margin-top: 10px; }",
    "summary { cursor: pointer; font-weight: bold; }",
    "a { color: #0077cc; }",
    "</style>",
]


def render_violation(violation):
    """Render one violation as a report card."""
    impact = _esc(violation.get("impact") or DEFAULT_IMPACT)
    nodes = violation.get("nodes") or []

    parts = [
        f"<div class='violation-card impact-{impact}'>",
        f"<h2>{_esc(violation.get('id', ''))} — {_esc(violation.get('description', ''))}</h2>",
        f"<span class='impact-label {impact}'>Impact: {impact.upper()}</span>",
        f"<p><strong>Help:</strong> <a href='{html.escape(violation.get('helpUrl') or '', quote=True)}' "
        f"target='_blank' rel='noopener'>{_esc(violation.get('help', ''))}</a></p>",
        "<details>",
        f"<summary>Show affected elements ({len(nodes)})</summary>",
    ]
    for node in nodes:
        parts.append(
            "<div class='node-list'>"
            f"<strong>Target:</strong> {_esc(_format_target(node.get('target')))}<br/>"
            f"<strong>Failure Summary:</strong> {_format_failure_summary(node.get('failureSummary'))}"
            "</div>"
        )
    parts.append("</details>")
    tags = ", ".join(str(t) for t in violation.get("tags") or [])
    parts.append(f"<p><strong>Tags:</strong> {_esc(tags)}</p>")
    parts.append("</div>")
    return "\n".join(parts)


def render_report(results, wcag_level):
    """Render axe results as a standalone HTML document.

    Violations appear in the order axe returned them. The output depends
    only on the arguments, so identical input gives identical HTML.
    """
    violations = results.get("violations", [])
    level_label = _esc(str(wcag_level).upper())

    html_parts = [
        "<!DOCTYPE html>",
        "<html lang='en'>",
        "<head>",
        "<meta charset='utf-8'>",
        "<meta name='viewport' content='width=device-width, initial-scale=1'>",
        "<title>Readable Accessibility Report</title>",
    ]
    html_parts.extend(REPORT_STYLES)
    html_parts.extend([
        "</head>",
        "<body>",
        f"<h1>Accessibility Report (WCAG {level_label})</h1>",
        f"<h3>Total Violations: {len(violations)}</h3>",
    ])
    for v in violations:
        html_parts.append(render_violation(v))
    html_parts.extend(["</body>", "</html>"])

    return "\n".join(html_parts) + "\n"


def write_report(html_text, path=REPORT_PATH):
    """Write the report, creating the parent directory and replacing any previous file."""
    report_path = Path(path)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(html_text, encoding="utf-8")
    return report_path


def print_summary(violations):
    """Print per-severity rule counts to stdout."""
    counts = count_by_severity(violations)
    print(f"  Found {len(violations)} violated rule(s)")
    for sev in SEVERITY_ORDER:
        print(f"    {sev:<10} {counts.get(sev, 0):>4}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description=(
            "Run an axe-core accessibility scan against the local dev server "
            f"({TARGET_URL}) and write a readable HTML report."
        )
    )
    parser.add_argument(
        "level", nargs="?", default=DEFAULT_LEVEL,
        help="WCAG conformance level: a, aa or aaa (default: aa)"
    )
    args = parser.parse_args(argv)

    request = build_scan_request(args.level)
    print(f"Running accessibility scan using WCAG level: {args.level.upper()}")
    print(f"Target: {request['target_url']}")
    print(f"Tags: {', '.join(request['tags'])}")

    try:
        results = run_scan(request)
        html_text = render_report(results, request["wcag_level"])
        report_path = write_report(html_text)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    print_summary(results.get("violations", []))
    print(f"\nReport: {report_path}")
    print("Done.")


if __name__ == "__main__":
    main()
