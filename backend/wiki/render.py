import markdown


def render_markdown(content: str) -> str:
    """Render Markdown source to HTML. The result is never persisted."""
    md = markdown.Markdown(
        extensions=[
            "markdown.extensions.fenced_code",
            "markdown.extensions.tables",
            "markdown.extensions.toc",
        ]
    )
    return md.convert(content or "")
