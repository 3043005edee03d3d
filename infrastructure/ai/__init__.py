"""Clients for the external chat-completion provider."""

from .completion_client import CompletionClient, get_completion_client, parse_json_reply

__all__ = ["CompletionClient", "get_completion_client", "parse_json_reply"]
