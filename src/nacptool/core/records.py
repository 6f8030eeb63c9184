"""Data classes representing decoded NACP control data."""

from __future__ import annotations

from dataclasses import dataclass, field

from nacptool.core.compression import DecompressionErrorKind
from nacptool.core.constants import Language


@dataclass(frozen=True)
class TitleEntry:
    """Application name and publisher for one language."""

    name: str
    publisher: str


@dataclass(frozen=True)
class TitleInfo:
    """A title entry tagged with its language, as shown to the user."""

    language: Language
    name: str
    publisher: str

    @property
    def is_extended(self) -> bool:
        return self.language.is_extended

    def __str__(self) -> str:
        if not self.name.strip() and not self.publisher.strip():
            return ""
        publisher = f" - {self.publisher}" if self.publisher else ""
        return f"{self.name}{publisher} ({self.language.display_name})"


@dataclass
class ControlProperty:
    """Fields read from a legacy-layout (canonical) NACP buffer.

    Only the 16 legacy languages live in ``titles``; extended languages are
    kept on :class:`NacpFile`.
    """

    titles: dict[Language, TitleEntry] = field(default_factory=dict)
    isbn: str = ""
    startup_user_account: int = 0
    attribute_flag: int = 0
    supported_language_flag: int = 0
    parental_control_flag: int = 0
    screenshot: int = 0
    video_capture: int = 0
    presence_group_id: str = ""
    display_version: str = ""
    add_on_content_base_id: str = ""
    save_data_owner_id: str = ""
    application_error_code_category: str = ""
    logo_type: int = 0
    logo_handling: int = 0
    bcat_passphrase: str = ""
    title_block_compressed: bool = False

    @property
    def supported_languages(self) -> list[Language]:
        """Languages whose bit is set in the supported language flag."""
        return [
            lang for lang in Language
            if self.supported_language_flag & (1 << lang.value)
        ]


@dataclass
class NacpFile:
    """Top-level result of decoding one control.nacp buffer.

    decompression_error is set when the title block was flagged as
    compressed but could not be inflated; ``control`` was then read from the
    raw bytes and its titles are likely garbage.
    """

    control: ControlProperty
    extended_titles: dict[Language, TitleEntry] = field(default_factory=dict)
    compressed: bool = False
    decompression_error: DecompressionErrorKind | None = None

    @property
    def degraded(self) -> bool:
        return self.decompression_error is not None

    @property
    def titles(self) -> dict[Language, TitleEntry]:
        """Legacy and extended titles merged, in language order."""
        merged = {**self.control.titles, **self.extended_titles}
        return {lang: merged[lang] for lang in sorted(merged)}

    def title_infos(self) -> list[TitleInfo]:
        return [
            TitleInfo(language=lang, name=entry.name, publisher=entry.publisher)
            for lang, entry in self.titles.items()
        ]

    def default_title(self) -> TitleInfo | None:
        """First title in language order (AmericanEnglish first), if any."""
        infos = self.title_infos()
        return infos[0] if infos else None
