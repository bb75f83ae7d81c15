from __future__ import annotations
from html import escape
from typing import Any, Dict, List, Union

from .remediation import NO_REVIEW_MESSAGE
from .types import EvaluationResult

def _e(value: Any) -> str:
    return escape("" if value is None else str(value))

def _skill_row(skill: str, d: Dict[str, Any]) -> str:
    return (f"<tr><td>{_e(skill)}</td><td>{int(d.get('pct', 0) or 0)}%</td>"
            f"<td>{d.get('correct', 0)}/{d.get('total', 0)}</td></tr>")

def _mistake_row(m: Dict[str, Any]) -> str:
    return (f"<tr><td>{_e(m.get('section'))}</td><td>{_e(m.get('level_hint'))}</td>"
            f"<td>{_e(m.get('prompt'))}</td><td>{_e(m.get('your'))}</td><td>{_e(m.get('correct'))}</td></tr>")

def render_report_html(result: Union[EvaluationResult, Dict[str, Any]], candidate: str = "Candidate") -> str:
    data = result.to_dict() if isinstance(result, EvaluationResult) else dict(result or {})
    skills = data.get("skill_breakdown") or {}
    rows = "\n".join(_skill_row(k, v or {}) for k, v in skills.items())

    plan = data.get("review_plan") or []
    if plan:
        items: List[str] = []
        for entry in plan:
            if not isinstance(entry, dict):
                continue
            items.append(
                f"<li><b>{_e(entry.get('topic'))}</b>: {_e(entry.get('prescription'))} "
                f"<span class=\"badge\">x{int(entry.get('count', 0) or 0)}</span></li>"
            )
        review_html = f"<ul class=\"tight\">{''.join(items)}</ul>"
    else:
        review_html = f"<p>{_e(NO_REVIEW_MESSAGE)}</p>"

    writing = data.get("writing") or []
    writing_html = ""
    if writing:
        lines = [f"<li>{_e(w.get('item_id'))}: {int(w.get('score', 0))}/6 ({_e(w.get('level'))})</li>" for w in writing]
        writing_html = "<h3>Writing</h3><ul>" + "".join(lines) + "</ul>"

    mistakes = data.get("mistakes") or []
    mistakes_html = ""
    if mistakes:
        mistakes_html = (
            "<h3>Mistakes</h3>"
            "<table border='1' cellpadding='6' cellspacing='0'>"
            "<thead><tr><th>Section</th><th>Level</th><th>Question</th><th>Your answer</th><th>Correct</th></tr></thead>"
            "<tbody>" + "\n".join(_mistake_row(m) for m in mistakes if isinstance(m, dict)) + "</tbody></table>"
        )

    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>English Test Results</title>
<style>
 body{{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,'Helvetica Neue',Arial}}
 .wrap{{max-width:960px;margin:40px auto;padding:0 16px}}
 h1{{margin:0 0 16px}}
 .overall{{font-size:1.1rem;margin:8px 0 16px}}
 .badge{{display:inline-block;padding:0 6px;border-radius:4px;background:#eef}}
 table{{border-collapse:collapse;width:100%}}
 th,td{{text-align:left}}
</style>
</head>
<body>
<div class="wrap">
  <h1>English Test Results: {_e(candidate)}</h1>
  <div class="overall"><b>Predicted CEFR:</b> {_e(data.get('predicted_level'))} · <b>Overall:</b> {int(data.get('overall_percent', 0) or 0)}%</div>

  <table border='1' cellpadding='6' cellspacing='0'>
    <thead><tr><th>Skill</th><th>Score</th><th>Units</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>

  {writing_html}

  <h3>Ripasso</h3>
  {review_html}

  {mistakes_html}
</div>
</body>
</html>"""

def export_report_html(result: Union[EvaluationResult, Dict[str, Any]], path: str, candidate: str = "Candidate") -> str:
    html = render_report_html(result, candidate=candidate)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
    return path
