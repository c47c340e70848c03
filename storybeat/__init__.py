"""storybeat: narrative directive lowering for visual-novel scenes."""

__version__ = "0.1.0"
