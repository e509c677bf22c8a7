"""Typed content-delivery client for a Strapi-backed blog front-end."""

__version__ = "0.3.0"
