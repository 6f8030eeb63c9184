"""NACP report data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from nacptool.core.records import NacpFile, TitleInfo


@dataclass
class NacpReport:
    """Everything worth exporting about one decoded control.nacp file."""

    source_file: str = ""
    title_format: str = ""
    display_version: str = ""
    presence_group_id: str = ""
    add_on_content_base_id: str = ""
    save_data_owner_id: str = ""
    application_error_code_category: str = ""
    isbn: str = ""
    supported_languages: list[str] = field(default_factory=list)
    titles: list[TitleInfo] = field(default_factory=list)
    decompression_error: str | None = None
    generated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_nacp(cls, nacp: NacpFile, source_file: str | Path = "") -> NacpReport:
        control = nacp.control
        return cls(
            source_file=str(source_file),
            title_format="compressed" if nacp.compressed else "legacy",
            display_version=control.display_version,
            presence_group_id=control.presence_group_id,
            add_on_content_base_id=control.add_on_content_base_id,
            save_data_owner_id=control.save_data_owner_id,
            application_error_code_category=control.application_error_code_category,
            isbn=control.isbn,
            supported_languages=[lang.display_name for lang in control.supported_languages],
            titles=nacp.title_infos(),
            decompression_error=(
                nacp.decompression_error.value if nacp.decompression_error else None
            ),
        )

    @property
    def extended_title_count(self) -> int:
        return sum(1 for t in self.titles if t.is_extended)

    def title_rows(self) -> list[dict]:
        return [
            {
                "language": t.language.display_name,
                "language_id": t.language.value,
                "extended": t.is_extended,
                "name": t.name,
                "publisher": t.publisher,
            }
            for t in self.titles
        ]

    def to_dict(self) -> dict:
        return {
            "source_file": self.source_file,
            "title_format": self.title_format,
            "display_version": self.display_version,
            "presence_group_id": self.presence_group_id,
            "add_on_content_base_id": self.add_on_content_base_id,
            "save_data_owner_id": self.save_data_owner_id,
            "application_error_code_category": self.application_error_code_category,
            "isbn": self.isbn,
            "supported_languages": self.supported_languages,
            "decompression_error": self.decompression_error,
            "generated_at": self.generated_at,
            "titles": self.title_rows(),
        }
