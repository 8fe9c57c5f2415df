#!/usr/bin/env python3
import logging
import os
from typing import Mapping, Optional

from ..commands.dispatch import Command, build_external, noop, resolve_builtin
from ..config import ShellConfig
from .expansion import expand_alias
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


class Parser:
    def __init__(
        self,
        config: ShellConfig,
        system_env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.config = config
        self.system_env = system_env if system_env is not None else os.environ

    def parse(self, line: str) -> Command:
        """Turn one input line into a command, raising ``UnclosedQuoteError``."""
        line = line.strip()
        if not line:
            return noop()

        line, expanded = expand_alias(line, self.config.aliases)
        if expanded:
            logger.debug("Alias expanded to %r", line)

        tokens = tokenize(line)
        if not tokens:
            return noop()

        builtin = resolve_builtin(tokens)
        if builtin is not None:
            return builtin

        return build_external(tokens, self.config.environment, self.system_env)
