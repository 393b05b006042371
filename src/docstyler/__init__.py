"""Convert Markdown and Word documents into styled PDF or DOCX output."""

__version__ = "0.1.0"
