"""Short code assignment: user alias, explicit code or a random nanoid.

Precedence when several sources are present::

    stripped alias  >  explicit code  >  generate_code()

The generator never checks uniqueness itself. The store's unique constraint is
the single source of truth and reports a ``CodeConflictError`` on collision.
"""

from dataclasses import dataclass

from nanoid import generate

from shortlinks.exceptions import InvalidInputError
from shortlinks.validation import CODE_MIN_LENGTH, RESERVED_CODES, validate_code

__all__ = ["ALPHABET", "CodeChoice", "generate_code", "resolve_code", "strip_alias_prefix"]

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_-"
DEFAULT_CODE_LENGTH = 6


@dataclass(frozen=True)
class CodeChoice:
    code: str
    alias: str | None = None
    generated: bool = False


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
    return generate(ALPHABET, length)


def strip_alias_prefix(alias: str, prefix: str) -> str:
    if prefix and alias.startswith(prefix):
        return alias[len(prefix):]
    return alias


def resolve_code(
    alias: str | None = None,
    code: str | None = None,
    *,
    prefix: str = "",
    length: int = DEFAULT_CODE_LENGTH,
) -> CodeChoice:
    """Pick the code for a new link.

    Raises:
        InvalidInputError: the alias (after prefix stripping) or the explicit
            code breaks the length/charset rule.
    """
    if alias is not None:
        stripped = strip_alias_prefix(alias, prefix)
        # Only a bare prefix counts as no alias.
        if stripped or not alias:
            if len(stripped) < CODE_MIN_LENGTH:
                message = f"Alias must be at least {CODE_MIN_LENGTH} characters"
                if prefix and stripped != alias:
                    message += f' after removing "{prefix}"'
                raise InvalidInputError(message, field="alias")
            check = validate_code(stripped, field="alias")
            if not check.ok:
                raise InvalidInputError(check.message, field=check.field)
            return CodeChoice(code=stripped, alias=stripped)

    if code is not None:
        check = validate_code(code, field="code")
        if not check.ok:
            raise InvalidInputError(check.message, field=check.field)
        return CodeChoice(code=code)

    code = generate_code(length)
    while code in RESERVED_CODES:
        code = generate_code(length)
    return CodeChoice(code=code, generated=True)
