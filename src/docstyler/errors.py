"""Exception types shared across the pipeline."""

from __future__ import annotations


class DocstylerError(Exception):
    """Base class for errors that abort a processing run."""


class UnsupportedInput(DocstylerError):
    """The input cannot be parsed as the format it claims to be."""


class ConfigError(DocstylerError):
    """Invalid layout style, output format or override value."""


class PartialDegradation(Exception):
    """A collaborator failed for a single item; callers fall back and continue."""
