"""Input validation and response shaping shared by the CLI and the web app."""

from .assembler import Assemble
from .targets import InvalidDomain, require_domain

__all__ = ["Assemble", "InvalidDomain", "require_domain"]
