"""Markdown and JSON renderers for CLI output."""

import json
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from ..models.content import DisplayPost, PageInfo


def render_json(value) -> str:
    """Render a model, a sequence of models or a plain value as JSON."""
    if isinstance(value, BaseModel):
        data = value.model_dump(mode="json")
    elif isinstance(value, (list, tuple)):
        data = [v.model_dump(mode="json") if isinstance(v, BaseModel) else v for v in value]
    else:
        data = value
    return json.dumps(data, indent=2, ensure_ascii=False)


def _post_line(post: DisplayPost) -> str:
    meta = [post.formatted_date, f"{post.reading_time} min", post.author_name]
    line = f"- **{post.title}** (`{post.slug}`) - " + " | ".join(m for m in meta if m)
    if post.category_names:
        line += f" [{', '.join(post.category_names)}]"
    return line


def render_posts_markdown(
    title: str,
    posts: Sequence[DisplayPost],
    pagination: Optional[PageInfo] = None,
) -> str:
    lines = [f"# {title}", ""]
    if not posts:
        lines.append("_No posts._")
    for post in posts:
        lines.append(_post_line(post))
    if pagination is not None:
        lines.append("")
        lines.append(
            f"Page {pagination.page} of {pagination.total_pages} "
            f"({pagination.total_posts} posts)"
        )
    return "\n".join(lines)


def render_post_markdown(post: DisplayPost) -> str:
    lines = [f"# {post.title}", ""]
    byline = [post.author_name, post.formatted_date, f"{post.reading_time} min read"]
    lines.append(" | ".join(b for b in byline if b))
    if post.hero_image_url:
        lines.append("")
        lines.append(f"![{post.title}]({post.hero_image_url})")
    if post.description:
        lines.append("")
        lines.append(f"> {post.description}")
    if post.category_names or post.tag_names:
        lines.append("")
        if post.category_names:
            lines.append(f"Categories: {', '.join(post.category_names)}")
        if post.tag_names:
            lines.append(f"Tags: {', '.join(post.tag_names)}")
    lines.append("")
    lines.append(post.content)
    return "\n".join(lines)


def render_names_markdown(title: str, names: Iterable[str]) -> str:
    lines = [f"# {title}", ""]
    entries = [f"- {name}" for name in names]
    lines.extend(entries or ["_None._"])
    return "\n".join(lines)
