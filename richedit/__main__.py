"""Allow ``python -m richedit``."""

from richedit.cli.main import app

app()
