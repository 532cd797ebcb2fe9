from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from jinja2 import BaseLoader, Environment, StrictUndefined

from ..models import SourceDocument

REPORT_TEMPLATE = """\
You are a research assistant tasked with creating a comprehensive report based on multiple sources.
The report should specifically address this request: "{{ user_request }}"

Your report should:
1. Have a clear title that reflects the specific analysis requested
2. Begin with a concise executive summary
3. Be organized into relevant sections based on the analysis requested
4. Use markdown formatting for emphasis, lists, and structure
5. Integrate information from sources naturally without explicitly referencing them by number
6. Maintain objectivity while addressing the specific aspects requested in the prompt
7. Compare and contrast the information from each source, noting areas of consensus or points of contention.
8. Showcase key insights, important data, or innovative ideas.

Here are the source articles to analyze:
{% for source in sources %}

Title: {{ source.title }}
URL: {{ source.url }}
Content: {{ source.content }}
---
{% endfor %}

Format the report as a JSON object with the following structure:
{
  "title": "Report title",
  "summary": "Executive summary (can include markdown)",
  "sections": [
    {
      "title": "Section title",
      "content": "Section content with markdown formatting"
    }
  ]
}

Use markdown formatting in the content to improve readability:
- Use **bold** for emphasis
- Use bullet points and numbered lists where appropriate
- Use headings and subheadings with # syntax
- Include code blocks if relevant
- Use > for quotations
- Use --- for horizontal rules where appropriate

Important: Do not use phrases like "Source 1" or "According to Source 2". \
Instead, integrate the information naturally into the narrative or reference sources by their titles when necessary.
"""


class PromptBuilder:
    """Renders the report synthesis instruction using a Jinja2 template.

    Rendering depends only on the template, the sources and the request, so
    identical inputs always produce identical prompts.
    """

    def __init__(
        self,
        *,
        template: Optional[str] = None,
        variables: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self.template = template or REPORT_TEMPLATE
        self.variables = variables or {}
        self._compiled = self.env.from_string(self.template)

    def build(self, sources: Sequence[SourceDocument], user_request: str) -> str:
        ctx = {**self.variables, "sources": list(sources), "user_request": user_request}
        return self._compiled.render(**ctx).strip()
