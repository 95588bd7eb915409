"""Exception types raised by the alignment engine.

Only two things are errors here: asking for a configuration the engine cannot
honour, and handing it annotation data that breaks the offset invariants.
A response that aligns to nothing is a normal, empty result.
"""


class SpanAlignError(Exception):
    """Base class for all spanalign errors."""


class AlignmentConfigurationError(SpanAlignError, ValueError):
    """The requested alignment policy cannot be satisfied.

    Raised at construction time, for example when auxiliary-head relaxation is
    requested but no auxiliary parse was supplied for the document.
    """


class AnnotationIntegrityError(SpanAlignError):
    """Reference annotation data violates an offset or identity invariant.

    Examples: a head range that is not enclosed by its mention extent, a range
    whose start is after its end, or two mentions sharing one identifier.

    Not a `ValueError`, so Pydantic validators propagate it unchanged instead
    of wrapping it in a `ValidationError`.
    """
