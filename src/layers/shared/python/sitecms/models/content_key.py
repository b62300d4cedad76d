"""Content key codec.

A content key addresses one editable value: ``{page_id}:{section_id}:{field_key}``.
Examples: ``home:hero-1:headline``, ``about:feature-grid-2:features.0.title``.

The delimiter is never allowed inside a component, so every valid token
decodes to exactly one triple and no two triples share a token.
"""

from dataclasses import dataclass

from sitecms.utils.exceptions import MalformedKeyError

DELIMITER = ":"
COMPONENT_COUNT = 3


def _check_component(name: str, value: str, token: str) -> None:
    if not isinstance(value, str) or not value:
        raise MalformedKeyError(token, f"{name} must be a non-empty string")
    if DELIMITER in value:
        raise MalformedKeyError(token, f"{name} may not contain '{DELIMITER}'")
    if value != value.strip():
        raise MalformedKeyError(token, f"{name} may not have surrounding whitespace")


@dataclass(frozen=True)
class ContentKey:
    """Address of one editable value inside a page section."""

    page_id: str
    section_id: str
    field_key: str

    @classmethod
    def from_parts(cls, page_id: str, section_id: str, field_key: str) -> "ContentKey":
        """Build a key from its components, validating each one.

        Raises:
            MalformedKeyError: If a component is empty or contains the delimiter.
        """
        token = DELIMITER.join(str(p) for p in (page_id, section_id, field_key))
        _check_component("page_id", page_id, token)
        _check_component("section_id", section_id, token)
        _check_component("field_key", field_key, token)
        return cls(page_id, section_id, field_key)

    @property
    def token(self) -> str:
        return DELIMITER.join((self.page_id, self.section_id, self.field_key))

    @property
    def field_path(self) -> list[str]:
        """Dotted field key split into path segments."""
        return self.field_key.split(".")

    def __str__(self) -> str:
        return self.token


def encode(page_id: str, section_id: str, field_key: str) -> str:
    """Encode a (page, section, field) triple into a content key token."""
    return ContentKey.from_parts(page_id, section_id, field_key).token


def decode(token: str) -> ContentKey:
    """Decode a content key token.

    Raises:
        MalformedKeyError: If the token does not hold exactly three non-empty
            components.
    """
    if not isinstance(token, str):
        raise MalformedKeyError(repr(token), "content key must be a string")

    parts = token.split(DELIMITER)
    if len(parts) != COMPONENT_COUNT:
        raise MalformedKeyError(
            token, f"expected {COMPONENT_COUNT} components, found {len(parts)}"
        )

    return ContentKey.from_parts(*parts)
