"""Editor service: command dispatch at the restored selection."""

from richedit.editor.service import EditorService, run_with_retry

__all__ = ["EditorService", "run_with_retry"]
