"""Convert Markdown to an HTML fragment in one call."""

from mamd import convert

html = convert("# Hello **World**\n\n```python\nprint('hi')\n```\n")
print(html)
