class AnnotationError(Exception):
    """Raised when the annotation service call fails or returns an error."""
