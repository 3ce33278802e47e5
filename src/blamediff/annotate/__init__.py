"""Annotated rendering of diffs."""

from .pipeline import AnnotationPipeline, build_pipeline
from .renderer import AnnotatedRenderer, render_file

__all__ = [
	"AnnotatedRenderer",
	"AnnotationPipeline",
	"build_pipeline",
	"render_file",
]
