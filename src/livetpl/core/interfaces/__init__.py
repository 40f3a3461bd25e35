from .completion import CompletionProvider
from .document import DocumentProtocol
from .input import InputSourceProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol
from .preview import PreviewProtocol

__all__ = [
    'CompletionProvider',
    'DocumentProtocol',
    'InputSourceProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
    'PreviewProtocol',
]
