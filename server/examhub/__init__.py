"""ExamHub: exam authoring backend and client workflow helpers."""

__version__ = "0.1.0"
