"""CLI entrypoint for the blog content client."""

import argparse
import sys
from pathlib import Path

from blogcms.config.loader import load_client_config
from blogcms.errors import BlogCMSError
from blogcms.output.listing import (
    render_json,
    render_names_markdown,
    render_post_markdown,
    render_posts_markdown,
)
from blogcms.services.content_manager import ContentManager
from blogcms.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _manager(args: argparse.Namespace) -> ContentManager:
    config_path = Path(args.config) if args.config else None
    return ContentManager.from_config(load_client_config(config_path))


def _print_page(manager: ContentManager, title: str, page, args: argparse.Namespace) -> None:
    posts = [manager.format_post_for_display(p) for p in page.posts]
    if args.format == "json":
        print(render_json({"posts": [p.model_dump(mode="json") for p in posts], "pagination": page.pagination.model_dump()}))
    else:
        print(render_posts_markdown(title, posts, page.pagination))


def _print_outcome_posts(manager: ContentManager, title: str, outcome, args: argparse.Namespace) -> None:
    if outcome.degraded:
        print(f"Warning: {title} unavailable ({outcome.cause})", file=sys.stderr)
    posts = [manager.format_post_for_display(p) for p in outcome.value]
    if args.format == "json":
        print(render_json(posts))
    else:
        print(render_posts_markdown(title, posts))


def _print_outcome_names(title: str, outcome, args: argparse.Namespace) -> None:
    if outcome.degraded:
        print(f"Warning: {title} unavailable ({outcome.cause})", file=sys.stderr)
    if args.format == "json":
        print(render_json(list(outcome.value)))
    else:
        print(render_names_markdown(title, [item.name for item in outcome.value]))


def cmd_health(args: argparse.Namespace) -> int:
    """Check that the CMS is reachable."""
    ok = _manager(args).health_check()
    print("OK" if ok else "UNREACHABLE")
    return 0 if ok else 1


def cmd_posts(args: argparse.Namespace) -> int:
    """List published posts for the home page."""
    manager = _manager(args)
    page = manager.get_posts_for_home_page(page=args.page, page_size=args.page_size)
    _print_page(manager, "Posts", page, args)
    return 0


def cmd_post(args: argparse.Namespace) -> int:
    """Show a single post with its related posts."""
    manager = _manager(args)
    post = manager.get_post_by_slug(args.slug)
    display = manager.format_post_for_display(post)
    related = manager.get_related_posts(post.id, limit=args.related) if post.id is not None else None
    related_display = [manager.format_post_for_display(p) for p in related.value] if related else []

    if args.format == "json":
        payload = display.model_dump(mode="json")
        payload["related"] = [p.model_dump(mode="json") for p in related_display]
        print(render_json(payload))
        return 0

    print(render_post_markdown(display))
    if related_display:
        print()
        print(render_posts_markdown("Related", related_display))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Search posts by title and description."""
    manager = _manager(args)
    page = manager.search_posts(args.query, page=args.page, page_size=args.page_size)
    _print_page(manager, f"Search: {args.query}", page, args)
    return 0


def cmd_category(args: argparse.Namespace) -> int:
    """List posts in a category."""
    manager = _manager(args)
    page = manager.get_posts_by_category(args.category_id, page=args.page, page_size=args.page_size)
    _print_page(manager, f"Category {args.category_id}", page, args)
    return 0


def cmd_related(args: argparse.Namespace) -> int:
    manager = _manager(args)
    _print_outcome_posts(manager, "Related", manager.get_related_posts(args.post_id, limit=args.limit), args)
    return 0


def cmd_featured(args: argparse.Namespace) -> int:
    manager = _manager(args)
    _print_outcome_posts(manager, "Featured", manager.get_featured_posts(limit=args.limit), args)
    return 0


def cmd_recent(args: argparse.Namespace) -> int:
    manager = _manager(args)
    _print_outcome_posts(manager, "Recent", manager.get_recent_posts(limit=args.limit), args)
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    _print_outcome_names("Categories", _manager(args).get_categories(), args)
    return 0


def cmd_authors(args: argparse.Namespace) -> int:
    _print_outcome_names("Authors", _manager(args).get_authors(), args)
    return 0


def cmd_tags(args: argparse.Namespace) -> int:
    _print_outcome_names("Tags", _manager(args).get_tags(), args)
    return 0


def _add_paging(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--page-size", type=int, default=10, help="Posts per page (default: 10)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blogcms",
        description="Query blog content from a Strapi CMS",
    )
    parser.add_argument("--config", type=str, help="Path to YAML config (default: blogcms.config.yaml)")
    parser.add_argument(
        "--format",
        type=str,
        choices=["md", "json"],
        default="md",
        help="Output format: md or json (default: md)",
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    health_parser = subparsers.add_parser("health", help="Check CMS connectivity")
    health_parser.set_defaults(func=cmd_health)

    posts_parser = subparsers.add_parser("posts", help="List published posts")
    _add_paging(posts_parser)
    posts_parser.set_defaults(func=cmd_posts)

    post_parser = subparsers.add_parser("post", help="Show a post by slug")
    post_parser.add_argument("slug", type=str)
    post_parser.add_argument("--related", type=int, default=3, help="Related posts to show (default: 3)")
    post_parser.set_defaults(func=cmd_post)

    search_parser = subparsers.add_parser("search", help="Search posts")
    search_parser.add_argument("query", type=str)
    _add_paging(search_parser)
    search_parser.set_defaults(func=cmd_search)

    category_parser = subparsers.add_parser("category", help="List posts in a category")
    category_parser.add_argument("category_id", type=int)
    _add_paging(category_parser)
    category_parser.set_defaults(func=cmd_category)

    related_parser = subparsers.add_parser("related", help="Posts related to a post id")
    related_parser.add_argument("post_id", type=int)
    related_parser.add_argument("--limit", type=int, default=3)
    related_parser.set_defaults(func=cmd_related)

    for name, func, help_text in (
        ("featured", cmd_featured, "List featured posts"),
        ("recent", cmd_recent, "List recent posts"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--limit", type=int, default=5)
        sub.set_defaults(func=func)

    subparsers.add_parser("categories", help="List categories").set_defaults(func=cmd_categories)
    subparsers.add_parser("authors", help="List authors").set_defaults(func=cmd_authors)
    subparsers.add_parser("tags", help="List tags").set_defaults(func=cmd_tags)

    return parser


def main(argv=None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.log_level)

    try:
        return args.func(args)
    except BlogCMSError as e:
        logger.error(f"Error running command '{args.command}': {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
