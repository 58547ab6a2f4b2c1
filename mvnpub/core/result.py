"""Result type for explicit error handling.

Every step of the publish pipeline returns either ``Ok(value)`` or
``Err(error)`` instead of raising. Callers branch on the variant and
propagate the error unchanged when they cannot handle it:

    imported = import_key(source=signing, work=work, gpg="gpg", console=console)
    if isinstance(imported, Err):
        return imported
    keyring = imported.value

Pattern matching works as well:

    match resolve_settings(os.environ):
        case Ok(settings):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful step carrying its value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed step carrying its error payload."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
