from app.services.auth import AuthService
from app.services.blog_query import BlogListQuery, build_blog_filter, merge_blog_update, parse_tags

__all__ = ["AuthService", "BlogListQuery", "build_blog_filter", "merge_blog_update", "parse_tags"]
