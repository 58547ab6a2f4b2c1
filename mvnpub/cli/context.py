from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from mvnpub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    env: Mapping[str, str]
    console: ConsoleProtocol


def build_context() -> CLIContext:
    return CLIContext(env=os.environ, console=RichConsole())
