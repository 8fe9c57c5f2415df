from .cancellation import CancellationToken
from .expansion import expand_alias, expand_variables
from .tokenizer import tokenize

__all__ = ["CancellationToken", "expand_alias", "expand_variables", "tokenize"]
