"""Errors raised while compiling annotation comments."""


class AnnotationError(ValueError):
    """Base class for every comment compilation failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.operation = None  # partially built Operation, set by the dispatcher


class MissingAnnotationError(AnnotationError):
    """The comment block is empty or never declared an @router tag."""

    def __init__(self, message: str = "Comment block has no @router annotation"):
        super().__init__(message)


class TagGrammarError(AnnotationError):
    def __init__(self, tag: str, text: str):
        super().__init__(f'Can not parse {tag} comment "{text}"')
        self.tag = tag
        self.text = text


class ResponseCodeError(AnnotationError):
    def __init__(self, code: str):
        super().__init__(f'Response http code must be int, got "{code}"')
        self.code = code


class ModelResolutionError(AnnotationError):
    """A response type reference could not be resolved into a model."""

    def __init__(self, type_ref: str, package: str, reason: str = "unknown model"):
        super().__init__(f'Can not resolve model "{type_ref}" in package "{package}": {reason}')
        self.type_ref = type_ref
        self.package = package
