"""git-blamediff - annotate the lines of a diff with the revisions that last changed them."""

__version__ = "0.2.0"
