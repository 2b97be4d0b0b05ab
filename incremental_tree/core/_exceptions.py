class InvalidArgumentError(ValueError):
    """A required argument is missing or not in the expected format."""


class ParseError(ValueError):
    """Persisted tree text is malformed."""


class EmptyTreeError(Exception):
    """The tree has no root node. Fit, insert or load before classifying."""


class MissingExemplarError(Exception):
    """A leaf must be split but holds no exemplar vector to split against."""


class UnknownFeatureError(KeyError):
    """A feature vector was asked for a feature it does not have."""
