from __future__ import annotations


class TranspilerException(Exception):
    pass


class InputClassificationException(TranspilerException):
    pass


class MissingElementException(TranspilerException):
    pass


class TypeMismatchException(TranspilerException):
    pass


class UnsupportedFeatureException(TranspilerException):
    pass


class ValidationException(TranspilerException):
    pass
