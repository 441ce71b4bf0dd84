"""
Profile document rendering.

A profile document is titled with the display name, stores the raw public
key as an alias so notes can link to it by pubkey, and uses the ``about``
text as its body.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .frontmatter import FrontmatterCodec
from .note import split_heading
from .text import clean_content, sanitize_filename, single_line


if TYPE_CHECKING:
    from notebrotr.models import ProfileData


REFERENCES_SCAFFOLD = "\n".join(
    [
        "## References",
        "### Author Of",
        "### Mentioned In",
        "### Contacts",
    ]
)


class ProfileRenderer:
    """Render kind 0 profiles, merging with any existing document."""

    def __init__(self, codec: FrontmatterCodec | None = None) -> None:
        self._codec = codec or FrontmatterCodec()

    @staticmethod
    def display_name(profile: ProfileData) -> str:
        return single_line(profile.title)

    def file_stem(self, profile: ProfileData) -> str:
        """File name without extension; also the wiki-link target."""
        return sanitize_filename(self.display_name(profile))

    def file_name(self, profile: ProfileData) -> str:
        return f"{self.file_stem(profile)}.md"

    def build_frontmatter(self, profile: ProfileData) -> dict[str, Any]:
        frontmatter: dict[str, Any] = {"aliases": [profile.pubkey]}
        optional = (
            ("nip05", profile.nip05),
            ("picture", profile.picture),
            ("name", profile.name),
            ("display_name", profile.display_name),
        )
        for key, value in optional:
            if value:
                frontmatter[key] = single_line(value)
        return frontmatter

    def render(
        self,
        profile: ProfileData,
        existing: str | None = None,
        *,
        include_references: bool = False,
    ) -> str:
        """Render *profile*.

        Args:
            profile: Decoded profile metadata.
            existing: Previous text of the same document, if any.
            include_references: Append the empty ``## References`` scaffold.
        """
        previous: dict[str, Any] = {}
        if existing:
            previous = self._codec.parse(split_heading(existing)).frontmatter

        sections = [
            f"# {self.display_name(profile)}",
            self._codec.stringify(self._codec.merge(previous, self.build_frontmatter(profile))),
            clean_content(profile.about) if profile.about else "",
        ]
        if include_references:
            sections.append(REFERENCES_SCAFFOLD)
        return "\n\n".join(section for section in sections if section)
